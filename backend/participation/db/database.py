from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from participation.core.config import settings


def _connect_args(database_url: str) -> dict:
    # connect_args 是SQLite特有的，用于允许多线程访问
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# 创建数据库引擎
engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL)
)

# 创建一个Session工厂
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# FastAPI 依赖项，用于在每个请求中获取数据库会话
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
