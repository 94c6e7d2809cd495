import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str | None = None) -> Engine:
    """
    Create the engine backing the key-value store.
    SQLite needs check_same_thread off because requests may be served from another thread;
    an in-memory SQLite database must share one connection or every thread sees an empty schema.
    """
    db_url = url or settings.DATABASE_URL
    kwargs: dict = {"pool_pre_ping": True, "echo": False}
    if db_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    logger.info("Using DATABASE_URL: %s...", db_url[:50])
    return create_engine(db_url, **kwargs)


engine = build_engine()

SessionLocal = sessionmaker(engine, expire_on_commit=False, class_=Session)

