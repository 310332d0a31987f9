"""
Structural validation of tool-call arguments.

Checks presence of required properties and the declared primitive type of
each supplied property, then fills in declared defaults. Business rules
(password complexity, valid regions, IP formats) are left to the backend.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping

from gateway.catalog import ToolDescriptor
from gateway.errors import ValidationError

logger = logging.getLogger("azure-gateway.validation")

_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, Mapping),
    "array": lambda v: isinstance(v, (list, tuple)),
}


def validate_arguments(descriptor: ToolDescriptor, arguments: Mapping[str, Any] | None) -> dict:
    """Return a fully populated argument dict for *descriptor*.

    Raises ValidationError naming the first missing or mistyped property.
    Properties not declared in the schema are dropped.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ValidationError(
            f"Arguments for '{descriptor.name}' must be an object, got {type(arguments).__name__}"
        )

    properties = descriptor.properties

    for prop in descriptor.required:
        if arguments.get(prop) is None:
            raise ValidationError(f"Missing required argument: {prop}", property_name=prop)

    validated: dict[str, Any] = {}
    for prop, spec in properties.items():
        if prop in arguments and arguments[prop] is not None:
            value = arguments[prop]
            expected = spec.get("type")
            check = _TYPE_CHECKS.get(expected)
            if check is not None and not check(value):
                raise ValidationError(
                    f"Invalid type for argument '{prop}': expected {expected}",
                    property_name=prop,
                )
            validated[prop] = value
        elif "default" in spec:
            validated[prop] = copy.deepcopy(spec["default"])

    extra = sorted(set(arguments) - set(properties))
    if extra:
        logger.debug("Ignoring undeclared arguments for %s: %s", descriptor.name, ", ".join(extra))

    return validated
