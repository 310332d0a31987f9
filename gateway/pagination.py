"""
Pagination adapter.

Azure list operations return a lazy ``ItemPaged`` that fetches pages as it
is iterated. ``drain`` consumes one completely, in backend order, before
anything is formatted. A failure part-way through discards what was read.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from azure.core.exceptions import AzureError

from gateway.errors import ListingTooLargeError, RemoteRejectionError

logger = logging.getLogger("azure-gateway.pagination")


def drain(
    pages: Iterable[Any],
    project: Callable[[Any], Any] | None = None,
    max_items: int | None = None,
    description: str = "listing",
) -> list:
    """Materialize *pages* into a list, applying *project* to each entity.

    Raises ListingTooLargeError when more than *max_items* entities are
    yielded, and RemoteRejectionError when the backend fails mid-listing.
    """
    items: list = []
    try:
        for entity in pages:
            if max_items is not None and len(items) >= max_items:
                raise ListingTooLargeError(
                    f"{description} returned more than {max_items} items; aborting"
                )
            items.append(project(entity) if project is not None else entity)
    except AzureError as exc:
        raise RemoteRejectionError(f"{description} failed after {len(items)} items: {exc}") from exc

    logger.debug("%s drained: %d items", description, len(items))
    return items
