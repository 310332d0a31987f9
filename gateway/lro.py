"""
Long-running operation tracker.

Drives an Azure begin/poll/complete cycle to a terminal state so a tool
call only ever returns the final entity or an error, never a pending one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from azure.core.exceptions import AzureError

from gateway.errors import OperationFailedError

logger = logging.getLogger("azure-gateway.lro")

FAILED_STATES = frozenset({"failed", "canceled", "cancelled"})


def submit_and_await(begin: Callable[[], Any], description: str) -> Any:
    """Start an operation with *begin* and block until it is terminal.

    *begin* returns a poller exposing ``result()`` and ``status()`` (an
    ``azure.core.polling.LROPoller`` or anything shaped like one). Failures
    raised before the poller exists propagate unchanged; failures while
    polling, and terminal failed/canceled states, raise
    OperationFailedError. Nothing is retried or rolled back.
    """
    poller = begin()
    logger.info("%s: started", description)

    try:
        result = poller.result()
    except AzureError as exc:
        raise OperationFailedError(f"{description} failed: {exc}", status=_status(poller)) from exc

    status = _status(poller)
    if status is not None and status.lower() in FAILED_STATES:
        raise OperationFailedError(f"{description} ended with status {status}", status=status)

    logger.info("%s: completed (%s)", description, status or "done")
    return result


def _status(poller: Any) -> str | None:
    try:
        status = poller.status()
    except AzureError:
        return None
    return str(status) if status is not None else None
