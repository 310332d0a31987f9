"""
Call outcomes and the response envelope handed back to the channel.

Handlers and the dispatcher stages produce a ``Success`` or a ``Failure``;
``to_envelope`` is the one place that decides how each becomes a
``ResponseEnvelope``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from gateway.errors import ErrorKind


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    trace: str = ""


Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ResponseEnvelope:
    content: tuple[TextContent, ...]
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    def to_dict(self) -> dict:
        """Render the wire shape; ``isError`` only appears on failures."""
        payload: dict = {"content": [{"type": c.type, "text": c.text} for c in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload


def error_text(failure: Failure) -> str:
    return f"Error: {failure.message}\n{failure.trace}"


def to_envelope(outcome: Outcome) -> ResponseEnvelope:
    if isinstance(outcome, Success):
        return ResponseEnvelope(content=(TextContent(str(outcome.value)),))

    if isinstance(outcome, Failure):
        return ResponseEnvelope(content=(TextContent(error_text(outcome)),), is_error=True)

    raise TypeError(f"Not an outcome: {outcome!r}")
