import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

from jobboard.config import settings
from jobboard.errors import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FetchResult(Generic[T]):
    data: T
    degraded: bool = False
    error: str | None = None


async def with_fallback(
    operation: str,
    fetch: Callable[[], Awaitable[T]],
    sample: Callable[[], T],
) -> FetchResult[T]:
    """Run ``fetch``; on a store failure serve ``sample()`` flagged as degraded.

    With ``sample_fallback_enabled`` off the ``StoreError`` propagates.
    """
    try:
        return FetchResult(await fetch())
    except StoreError as exc:
        if not settings.sample_fallback_enabled:
            raise
        logger.warning("%s failed, serving sample data: %s", operation, exc)
        return FetchResult(sample(), degraded=True, error=str(exc))


async def or_empty(operation: str, fetch: Callable[[], Awaitable[list]]) -> list:
    """Secondary panels: log a store failure and carry on with nothing."""
    try:
        return await fetch()
    except StoreError as exc:
        logger.warning("%s failed, continuing without it: %s", operation, exc)
        return []
