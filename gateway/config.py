"""
Process configuration, read once from the environment at startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from gateway.errors import ConfigError

REQUIRED_VARIABLES = (
    "AZURE_SUBSCRIPTION_ID",
    "AZURE_TENANT_ID",
    "AZURE_CLIENT_ID",
    "AZURE_CLIENT_SECRET",
)

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_MAX_LIST_ITEMS = 5000


@dataclass(frozen=True)
class GatewayConfig:
    subscription_id: str
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)
    log_level: str = DEFAULT_LOG_LEVEL
    max_list_items: int = DEFAULT_MAX_LIST_ITEMS


def load_config(environ: Mapping[str, str] | None = None) -> GatewayConfig:
    """Build a GatewayConfig from *environ* (defaults to ``os.environ``).

    Raises ConfigError naming every missing credential variable, or when
    an optional setting has an unusable value.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_VARIABLES if not env.get(name, "").strip()]
    if missing:
        raise ConfigError("Missing required environment variables: " + ", ".join(missing))

    log_level = env.get("GATEWAY_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Invalid GATEWAY_LOG_LEVEL: {log_level}")

    raw_max = env.get("GATEWAY_MAX_LIST_ITEMS", "").strip()
    if raw_max:
        try:
            max_list_items = int(raw_max)
        except ValueError:
            raise ConfigError(f"GATEWAY_MAX_LIST_ITEMS must be an integer, got {raw_max!r}") from None
        if max_list_items <= 0:
            raise ConfigError("GATEWAY_MAX_LIST_ITEMS must be positive")
    else:
        max_list_items = DEFAULT_MAX_LIST_ITEMS

    return GatewayConfig(
        subscription_id=env["AZURE_SUBSCRIPTION_ID"].strip(),
        tenant_id=env["AZURE_TENANT_ID"].strip(),
        client_id=env["AZURE_CLIENT_ID"].strip(),
        client_secret=env["AZURE_CLIENT_SECRET"].strip(),
        log_level=log_level,
        max_list_items=max_list_items,
    )
