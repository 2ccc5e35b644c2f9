"""Repository helpers shared by the Ledger and Tracking repositories."""

import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from protean.exceptions import ExpectedVersionError, InvalidOperationError, ObjectNotFoundError, ValidationError

from shared.errors import InvalidState, StorageError

logger = structlog.get_logger(__name__)

# Rows fetched per round trip when a read has to see every matching record
PAGE_SIZE = 500


@contextmanager
def storage_guard(operation: str) -> Iterator[None]:
    """Convert driver-level failures into ``StorageError``; domain errors pass through.

    A stale write rejected by aggregate versioning becomes ``InvalidState``:
    another writer changed the record first and the caller may retry.
    """
    try:
        yield
    except (ObjectNotFoundError, ValidationError, InvalidOperationError, StorageError):
        raise
    except ExpectedVersionError as exc:
        logger.warning("Concurrent modification rejected", operation=operation, error=str(exc))
        raise InvalidState(
            "Record was modified by another writer; retry the operation",
            field="_version",
            operation=operation,
        ) from exc
    except Exception as exc:
        logger.error("Persistence operation failed", operation=operation, error=str(exc))
        raise StorageError(operation, exc) from exc


def find_or_none(repository, identifier):
    """Load an aggregate by identifier, returning None when it does not exist."""
    with storage_guard(f"{type(repository).__name__}.get"):
        try:
            return repository.get(identifier)
        except ObjectNotFoundError:
            return None


def filter_page(
    repository,
    offset: int = 0,
    limit: int = PAGE_SIZE,
    order_by: str | None = None,
    **criteria,
) -> list:
    """One page of aggregates matching ``criteria`` (equality filters)."""
    with storage_guard(f"{type(repository).__name__}.filter"):
        query = repository._dao.query
        if criteria:
            query = query.filter(**criteria)
        if order_by:
            query = query.order_by(order_by)
        return query.offset(offset).limit(limit).all().items


def iter_all(repository, order_by: str | None = None, **criteria) -> Iterator:
    """Every aggregate matching ``criteria``, fetched page by page."""
    offset = 0
    while True:
        page = filter_page(repository, offset=offset, limit=PAGE_SIZE, order_by=order_by, **criteria)
        yield from page
        if len(page) < PAGE_SIZE:
            return
        offset += PAGE_SIZE


def filter_all(repository, order_by: str | None = None, **criteria) -> list:
    return list(iter_all(repository, order_by=order_by, **criteria))


def degrade_on_storage_error(fallback: Callable[[], Any]):
    """Read-side decorator: a StorageError is logged and ``fallback()`` returned instead."""

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except StorageError as exc:
                logger.error("Query degraded after storage failure", query=fn.__name__, **exc.context)
                return fallback()

        return wrapper

    return decorator
