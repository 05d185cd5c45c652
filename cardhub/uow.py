import logging
from typing import Generator

from cardhub.db import get_db
from fastapi import Depends
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class UnitOfWork:
    """One transaction per request or job: commit on success, rollback on error."""

    def __init__(self, db: Session):
        self.db = db

    def __getattr__(self, attr):
        # services use the unit of work as if it were the Session
        return getattr(self.db, attr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type:
                logger.debug("Rolling back unit of work: %s", exc_type.__name__)
                self.db.rollback()
            else:
                self.db.commit()
        finally:
            self.db.close()


def get_uow(
    db: Session = Depends(get_db),
) -> Generator[UnitOfWork, None, None]:
    """
    Dependency that yields a UnitOfWork instance.

    FastAPI resolves it once per request, so every service of the request
    shares the same transaction.
    """
    with UnitOfWork(db) as uow:
        yield uow
