"""
Dispatcher — routes a tool call to its handler and frames the response.

``call_tool`` never raises. Each stage (lookup, validation, handler) yields
an outcome; exceptions are converted to a ``Failure`` in exactly one place,
``_invoke``, and ``to_envelope`` turns the final outcome into the envelope
the channel sends back.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Callable, Mapping

from azure.core.exceptions import AzureError

from backend.facade import RemoteOperations
from gateway.catalog import TOOL_CATALOG, ToolDescriptor, check_catalog
from gateway.envelope import Failure, Outcome, ResponseEnvelope, Success, to_envelope
from gateway.errors import ErrorKind, GatewayError, UnknownToolError
from gateway.handlers import ToolHandlers
from gateway.validation import validate_arguments

logger = logging.getLogger("azure-gateway.dispatcher")


def _classify(exc: BaseException) -> ErrorKind:
    if isinstance(exc, GatewayError):
        return exc.kind
    if isinstance(exc, AzureError):
        return ErrorKind.REMOTE_REJECTION
    return ErrorKind.UNEXPECTED


def _invoke(func: Callable[[], Any]) -> Outcome:
    """Run *func*, returning Success(value) or a classified Failure."""
    try:
        return Success(func())
    except Exception as exc:
        kind = _classify(exc)
        if kind is ErrorKind.UNEXPECTED:
            logger.exception("Unexpected fault during tool call")
        return Failure(kind=kind, message=str(exc) or type(exc).__name__, trace=traceback.format_exc())


class Dispatcher:
    """Maps tool calls onto handlers for one catalog and one remote facade."""

    def __init__(
        self,
        remote: RemoteOperations,
        catalog: tuple[ToolDescriptor, ...] = TOOL_CATALOG,
        max_list_items: int | None = None,
        handlers: ToolHandlers | None = None,
    ) -> None:
        check_catalog(catalog)
        self._catalog = catalog
        self._by_name = {tool.name: tool for tool in catalog}
        self._handlers = handlers or ToolHandlers(remote, max_list_items=max_list_items)

    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        return self._catalog

    def _lookup(self, name: str) -> ToolDescriptor:
        descriptor = self._by_name.get(name)
        if descriptor is None:
            raise UnknownToolError(name)
        return descriptor

    def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> ResponseEnvelope:
        """Run one tool call to completion and return its envelope."""
        lookup = _invoke(lambda: self._lookup(name))
        if isinstance(lookup, Failure):
            outcome: Outcome = lookup
        else:
            descriptor = lookup.value
            validated = _invoke(lambda: validate_arguments(descriptor, arguments))
            if isinstance(validated, Failure):
                outcome = validated
            else:
                args = validated.value
                outcome = _invoke(lambda: self._handlers.run(name, args))

        self._log_outcome(name, outcome)
        return to_envelope(outcome)

    def _log_outcome(self, name: str, outcome: Outcome) -> None:
        if isinstance(outcome, Success):
            logger.info("%s: ok", name)
        elif outcome.kind is ErrorKind.UNKNOWN_TOOL:
            logger.warning("%s: unknown tool", name)
        elif outcome.kind is ErrorKind.VALIDATION:
            logger.info("%s: rejected: %s", name, outcome.message)
        elif outcome.kind is ErrorKind.REMOTE_REJECTION:
            logger.warning("%s: backend rejected call: %s", name, outcome.message)
        elif outcome.kind is ErrorKind.OPERATION_FAILED:
            logger.warning("%s: operation failed: %s", name, outcome.message)
        else:
            logger.error("%s: failed: %s", name, outcome.message)
