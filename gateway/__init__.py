"""Azure MCP gateway: tool catalog, validation, dispatch, and response framing."""

__version__ = "1.0.0"
