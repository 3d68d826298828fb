import logging

import psycopg2
from psycopg2 import errors, sql
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from xclone.core.config import Settings
from xclone.db.base import Base

logger = logging.getLogger(__name__)

# Bound to an engine by create_app(); tests override get_db instead.
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def build_engine(settings: Settings) -> Engine:
    return create_engine(settings.sqlalchemy_database_url, pool_pre_ping=True)


def ensure_database(settings: Settings) -> None:
    """Create the PostgreSQL database named in the settings if it doesn't exist."""
    url = make_url(settings.sqlalchemy_database_url)
    if not url.drivername.startswith("postgresql"):
        return
    try:
        conn = psycopg2.connect(
            dbname="postgres",
            user=url.username,
            password=url.password,
            host=url.host,
            port=url.port,
        )
        conn.autocommit = True
        cur = conn.cursor()
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(url.database)))
        cur.close()
        conn.close()
        logger.info("Created database %s", url.database)
    except errors.DuplicateDatabase:
        logger.debug("Database %s already exists", url.database)
    except psycopg2.Error as e:
        logger.warning("Could not ensure database exists: %s", e)


def init_db(engine: Engine) -> None:
    # register every table on Base.metadata
    from xclone.db.models import follower, like, post, repost, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
