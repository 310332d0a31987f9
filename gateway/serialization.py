"""
JSON rendering of Azure SDK responses for tool output text.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any


def serialize_value(obj: Any) -> Any:
    """Recursively convert an object to JSON-serializable form."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Enum):
        return serialize_value(obj.value)
    if isinstance(obj, bytes):
        return "<binary data omitted>"
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, timedelta):
        return str(obj)
    if isinstance(obj, dict):
        return {str(k): serialize_value(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [serialize_value(item) for item in obj]

    # msrest / autorest models
    if callable(getattr(obj, "as_dict", None)):
        return serialize_value(obj.as_dict())

    if hasattr(obj, "__dict__"):
        return {
            k: serialize_value(v)
            for k, v in vars(obj).items()
            if not k.startswith("_")
        }

    return str(obj)


def to_json(obj: Any) -> str:
    """Render *obj* as two-space-indented JSON."""
    return json.dumps(serialize_value(obj), indent=2, default=str)
