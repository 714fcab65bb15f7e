from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from smarthourly.config import settings


_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    if not settings.AUTO_CREATE_TABLES:
        return
    import smarthourly.models  # noqa: F401  registers mappers on Base.metadata
    Base.metadata.create_all(bind=engine)
