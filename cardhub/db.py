"""Database connection and initialization"""

import logging
import os
from typing import Any, Generator

from cardhub.config import Config, get_config
from cardhub.models.base import BaseModel

# register every table on BaseModel.metadata before create_all
from cardhub.models import (  # noqa: F401
    card_production_batch,
    card_template,
    card_verification_event,
    company,
    member,
    member_card,
)
from fastapi import Depends
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class DatabaseConnection:
    engine: Engine
    session_local: sessionmaker[Session]
    # Class-level flag ensures table creation runs only once per process.
    _initialized: bool = False

    def __init__(self, config: Config = Depends(get_config)) -> None:
        connect_args = {}
        if config.database_url.startswith("sqlite"):
            # Ensure the database folder exists.
            os.makedirs(config.database_path.parent, exist_ok=True)
            connect_args = {"check_same_thread": False}
        self.engine = create_engine(config.database_url, connect_args=connect_args)
        self.session_local = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )
        if not self.__class__._initialized:
            self.create_tables()
            self.__class__._initialized = True

    def create_tables(self) -> None:
        """Create all database tables defined in models."""
        logger.info("Creating database tables...")
        BaseModel.metadata.create_all(bind=self.engine)
        logger.info("Database tables created.")

    def drop_tables(self) -> None:
        """Drop all database tables."""
        logger.info("Dropping database tables...")
        BaseModel.metadata.drop_all(bind=self.engine)
        logger.info("Database tables dropped.")

    def get_session(self) -> Session:
        """Return a new SQLAlchemy session."""
        return self.session_local()


def get_db(db_conn: DatabaseConnection = Depends()) -> Generator[Session, Any, None]:
    """
    Dependency for providing a SQLAlchemy session to services and tests.

    Yields:
        SQLAlchemy Session.
    """
    session = db_conn.get_session()
    try:
        yield session
    finally:
        session.close()
