import logging
from typing import Optional

from sqlalchemy.engine import Engine

from participation.db.base_class import Base
from participation.db.database import engine as default_engine

# 导入所有模型，确保它们被正确注册
from participation.models.participant import Participant  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine: Optional[Engine] = None) -> None:
    """初始化数据库，创建所有表（已存在的表不会被重建）"""
    bind = engine or default_engine
    logger.info("Creating tables on %s", bind.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=bind)
