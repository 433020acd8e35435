"""
Database engine and session handling. The janitor holds a single connection
(through a single session) for the lifetime of the process.

The ORM modules use this as `from .. import database as db`.
"""

from loguru import logger
from sqlalchemy import Column, DateTime, Integer, Text, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from thumbnail_janitor.exceptions import DatabaseConnectionError

from .settings import ServerSettings

Base = declarative_base()


def create_database_engine(settings: ServerSettings) -> Engine:
    logger.info("Starting database engine")

    return create_engine(
        settings.database_uri,
        echo=settings.sql_echo,
        pool_pre_ping=True,
    )


def check_connection(engine: Engine):
    """
    Make sure the database is reachable before we start the loop.

    Raises
    ------
    DatabaseConnectionError
        If we could not connect or run a trivial query.
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise DatabaseConnectionError(
            database_uri=engine.url.render_as_string(hide_password=True),
            reason=str(e),
        ) from e


def get_session(engine: Engine) -> Session:
    """
    Returns a new database session bound to the engine.
    """
    session_maker = sessionmaker(bind=engine, expire_on_commit=False)
    return session_maker()
