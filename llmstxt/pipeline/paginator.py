"""Generic cursor pagination with an optional item cap.

Knows nothing about resource semantics: callers supply a `fetch_page(limit,
cursor)` coroutine and receive the concatenated items in source order.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import structlog

from llmstxt.core.exceptions import OriginError, OriginQueryFailed

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 50


@dataclass(frozen=True)
class Page(Generic[T]):
    """One batch returned by a fetch call."""

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


FetchPage = Callable[[int, str | None], Awaitable[Page[T]]]


async def paginate(
    fetch_page: FetchPage,
    *,
    resource: str,
    cap: int | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[T]:
    """Drain a cursor-paginated source until exhausted or `cap` items are collected.

    Each request asks for min(batch_size, remaining) items when capped. A batch
    that overshoots the cap is truncated and no further page is requested.

    Args:
        fetch_page: Coroutine taking (limit, cursor) and returning a Page
        resource: Resource label for errors and logs
        cap: Maximum number of items, None for unlimited
        batch_size: Items requested per call

    Returns:
        Collected items in source order

    Raises:
        OriginQueryFailed / OriginDataMissing: any fetch failure aborts pagination
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    if cap is not None and cap < 0:
        raise ValueError(f"cap must be >= 0, got {cap}")

    collected: list[T] = []
    cursor: str | None = None
    batches = 0

    while True:
        if cap is None:
            limit = batch_size
        else:
            remaining = cap - len(collected)
            if remaining <= 0:
                break
            limit = min(batch_size, remaining)

        try:
            page = await fetch_page(limit, cursor)
        except OriginError:
            raise
        except Exception as e:
            raise OriginQueryFailed(resource, f"{type(e).__name__}: {e}") from e

        batches += 1
        items = list(page.items)
        if cap is not None:
            items = items[: cap - len(collected)]
        collected.extend(items)

        if not page.has_more:
            break
        if not page.items:
            # Misbehaving origin: claims more pages but returned nothing
            logger.warning("pagination_empty_batch", resource=resource, batch=batches)
            break
        if not page.next_cursor:
            logger.warning("pagination_missing_cursor", resource=resource, batch=batches)
            break
        cursor = page.next_cursor

    logger.info(
        "pagination_complete",
        resource=resource,
        items=len(collected),
        batches=batches,
        cap=cap,
    )
    return collected
