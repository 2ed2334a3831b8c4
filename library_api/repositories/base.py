import functools
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from sqlalchemy import asc, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import ConflictException, InternalException, ValidationException
from library_api.logging import get_logger

logger = get_logger("repositories")


@dataclass
class ListOptions:
    """Sorting and paging for list queries. No capping happens here."""

    sort_by: Optional[str] = None
    sort_order: str = "asc"
    skip: int = 0
    limit: Optional[int] = None

    @property
    def descending(self) -> bool:
        return self.sort_order == "desc"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(column, value: str):
    """Case-insensitive substring match."""
    return column.ilike(f"%{escape_like(value)}%", escape="\\")


def order_clause(sortable: Dict[str, Any], options: ListOptions, resource: str):
    """Resolve ``options.sort_by`` against the sortable columns of a resource."""
    column = sortable.get(options.sort_by)
    if column is None:
        raise ValidationException(
            [
                f"Invalid sort field '{options.sort_by}' for {resource}. "
                f"Allowed: {', '.join(sortable)}"
            ],
            resource_type=resource,
        )
    return desc(column) if options.descending else asc(column)


def store_operation(
    operation: str, resource_type: str, conflict_message: Optional[str] = None
) -> Callable:
    """
    Decorator for repository methods talking to the store.

    Integrity violations (unique indexes) surface as ``ConflictException``;
    any other store failure as ``InternalException``. The session is rolled
    back in both cases.

    Args:
        operation: Operation name used in log lines
        resource_type: Resource the repository manages
        conflict_message: Message for unique index violations
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            db: AsyncSession = self.db
            try:
                return await func(self, *args, **kwargs)
            except IntegrityError as e:
                await db.rollback()
                logger.warning(f"{operation} on {resource_type} hit a constraint: {e.orig}")
                raise ConflictException(
                    conflict_message or f"{resource_type.capitalize()} already exists",
                    resource_type=resource_type,
                ) from e
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"{operation} on {resource_type} failed: {e}")
                raise InternalException(f"Error during {operation} of {resource_type}") from e

        return wrapper

    return decorator
