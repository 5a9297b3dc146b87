"""
数据库配置
支持SQLite（开发）和PostgreSQL（生产），连接串来自业务配置
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .settings import get_settings


def build_engine(database_url: str):
    """按连接串创建引擎，SQLite 允许跨线程使用同一连接"""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)


DATABASE_URL = get_settings().database_url

engine = build_engine(DATABASE_URL)

# 创建会话工厂
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# 依赖注入
def get_db():
    """数据库会话依赖注入"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
