import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, DateTime, Index, func
from participation.db.base_class import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Participant(Base):
    """参与者模型

    存储每个团队成员的姓名及其参与度百分比。

    Attributes:
        id: 系统生成的唯一ID (UUID)
        first_name: 名
        last_name: 姓
        participation: 参与度百分比，0-100
        created_at: 记录创建时间
        updated_at: 记录最近一次更新时间
    """
    __tablename__ = "participants"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column("firstname", String(50), nullable=False)
    last_name = Column("lastname", String(50), nullable=False)
    participation = Column(Float, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Participant {self.id} {self.first_name} {self.last_name} {self.participation}%>"


# 姓名唯一（不区分大小写），由数据库兜底并发写入
Index(
    "uq_participants_full_name",
    func.lower(Participant.first_name),
    func.lower(Participant.last_name),
    unique=True,
)
