"""Shared plumbing for the SQLAlchemy repositories"""

import asyncio
from contextlib import contextmanager
from typing import Callable, Generator, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class SqlRepository:
    """Runs blocking SQLAlchemy work on the default executor.

    Each call gets its own session: committed on success, rolled back on
    exception. SQLAlchemy exceptions propagate to the services, which wrap
    them in domain errors.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize repository with a session factory.

        Args:
            session_factory: Callable returning a new Session (e.g. database.SessionLocal)
        """
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    async def _run(self, fn: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)
