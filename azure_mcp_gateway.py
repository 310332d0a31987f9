#!/usr/bin/env python3
"""
Azure MCP Gateway — CLI entry point.

Usage:
    azure-mcp-gateway            Serve the tool catalog over MCP on stdio
    azure-mcp-gateway serve      Same as above
    azure-mcp-gateway tools      Print the tool catalog as JSON and exit

Environment:
    AZURE_SUBSCRIPTION_ID, AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET
        Service principal used for every backend call (required to serve).
    GATEWAY_LOG_LEVEL       Logging level written to stderr (default WARNING).
    GATEWAY_MAX_LIST_ITEMS  Cap on entities read by one listing (default 5000).
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys

logger = logging.getLogger("azure-gateway")


def _configure_logging(level: str) -> None:
    # stdout carries the protocol; all diagnostics go to stderr.
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Dispatch to the appropriate sub-command."""
    args = sys.argv[1:]

    if not args or args[0] == "serve":
        _cmd_serve()
    elif args[0] == "tools":
        _cmd_tools()
    else:
        print(f"Unknown command: {args[0]}", file=sys.stderr)
        print(__doc__, file=sys.stderr)
        sys.exit(1)


def _cmd_tools() -> None:
    """Print the catalog without touching Azure."""
    from gateway.catalog import list_tools

    json.dump({"tools": [tool.to_dict() for tool in list_tools()]}, sys.stdout, indent=2)
    sys.stdout.write("\n")


def _cmd_serve() -> None:
    from gateway.config import load_config
    from gateway.errors import ConfigError

    _configure_logging(os.environ.get("GATEWAY_LOG_LEVEL", "WARNING").upper())

    try:
        config = load_config()
    except ConfigError as exc:
        print(f"{exc}", file=sys.stderr)
        print(
            "Required: AZURE_SUBSCRIPTION_ID, AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET",
            file=sys.stderr,
        )
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)

    from backend.azure import create_azure_operations
    from gateway.channel import ChannelAdapter
    from gateway.dispatcher import Dispatcher

    remote = create_azure_operations(config)
    dispatcher = Dispatcher(remote, max_list_items=config.max_list_items)

    try:
        asyncio.run(ChannelAdapter(dispatcher).run())
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
