"""
Base Service.

Services own the business rules and sit between the API layer and the
repositories. Storage failures never leave a service as SQLAlchemy
exceptions: `_execute_db_operation` turns them into ConflictError or
DatabaseError so the API layer only deals with ApplicationError.
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.backend.core.exceptions import ConflictError, DatabaseError
from jotter.backend.core.logging import get_logger

T = TypeVar("T")

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for a unique constraint hit on PostgreSQL or SQLite."""
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


class BaseService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
        conflict_message: str = "Resource already exists",
    ) -> T:
        """
        Await a repository write, translating storage errors.

        Args:
            operation: Name used in logs and in DatabaseError messages
            coro: The repository call
            conflict_message: Client-facing message for unique violations

        Raises:
            ConflictError: Unique constraint violated
            DatabaseError: Any other SQLAlchemy failure
        """
        try:
            return await coro
        except IntegrityError as e:
            unique = is_unique_violation(e)
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "unique_violation": unique, "error": str(e.orig)},
            )
            if unique:
                raise ConflictError(conflict_message) from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
