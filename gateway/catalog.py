"""
Tool catalog — the fixed, ordered table of tools the gateway exposes.

Each entry carries the tool name, a human description, and the JSON-Schema
input contract the validator enforces. The table is built once at import
time and never mutated; registration order is the order callers see.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_LOCATION = "eastus"
DEFAULT_ADMIN_USER = "sqladmin"
DEFAULT_EDITION = "Basic"

DATABASE_MONTHLY_COST = 5.00  # flat illustrative charge per SQL database


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: Mapping[str, Any] = field(default_factory=dict)

    @property
    def properties(self) -> Mapping[str, Any]:
        return self.input_schema.get("properties", {})

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(self.input_schema.get("required", ()))

    def to_dict(self) -> dict:
        """Render the descriptor in the wire shape used by ``tools/list``."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": _thaw(self.input_schema),
        }


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _string(description: str, default: str | None = None) -> dict:
    prop = {"type": "string", "description": description}
    if default is not None:
        prop["default"] = default
    return prop


def _tool(name: str, description: str, properties: dict, required: list[str] | None = None) -> ToolDescriptor:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return ToolDescriptor(name=name, description=description, input_schema=_freeze(schema))


_RESOURCE_GROUP = _string("Resource group name")
_SERVER_NAME = _string("SQL server name")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

TOOL_CATALOG: tuple[ToolDescriptor, ...] = (
    _tool(
        "list_resource_groups",
        "List all resource groups in the subscription",
        {},
    ),
    _tool(
        "create_resource_group",
        "Create a new resource group for DP-300 practice",
        {
            "name": _string("Resource group name (e.g., dp300-practice-rg)"),
            "location": _string("Azure region (e.g., eastus, westus2)", DEFAULT_LOCATION),
        },
        ["name"],
    ),
    _tool(
        "delete_resource_group",
        "Delete a resource group and all its resources (cleanup)",
        {"name": _string("Resource group name to delete")},
        ["name"],
    ),
    _tool(
        "list_sql_servers",
        "List all SQL servers in a resource group",
        {"resourceGroup": _RESOURCE_GROUP},
        ["resourceGroup"],
    ),
    _tool(
        "create_sql_server",
        "Create an Azure SQL logical server",
        {
            "resourceGroup": _RESOURCE_GROUP,
            "serverName": _string("SQL server name (must be globally unique)"),
            "location": _string("Azure region", DEFAULT_LOCATION),
            "adminUser": _string("Administrator username", DEFAULT_ADMIN_USER),
            "adminPassword": _string("Administrator password (min 8 chars, complex)"),
        },
        ["resourceGroup", "serverName", "adminPassword"],
    ),
    _tool(
        "list_sql_databases",
        "List all databases on a SQL server",
        {"resourceGroup": _RESOURCE_GROUP, "serverName": _SERVER_NAME},
        ["resourceGroup", "serverName"],
    ),
    _tool(
        "create_sql_database",
        "Create an Azure SQL Database",
        {
            "resourceGroup": _RESOURCE_GROUP,
            "serverName": _SERVER_NAME,
            "databaseName": _string("Database name"),
            "edition": _string("Service tier (Basic, Standard, Premium)", DEFAULT_EDITION),
            "sampleName": _string("Sample database (AdventureWorksLT or empty)", ""),
        },
        ["resourceGroup", "serverName", "databaseName"],
    ),
    _tool(
        "create_firewall_rule",
        "Add firewall rule to SQL server",
        {
            "resourceGroup": _RESOURCE_GROUP,
            "serverName": _SERVER_NAME,
            "ruleName": _string("Firewall rule name"),
            "startIpAddress": _string("Start IP address"),
            "endIpAddress": _string("End IP address"),
        },
        ["resourceGroup", "serverName", "ruleName", "startIpAddress", "endIpAddress"],
    ),
    _tool(
        "get_database_metrics",
        "Get performance metrics for a SQL database",
        {
            "resourceGroup": _RESOURCE_GROUP,
            "serverName": _SERVER_NAME,
            "databaseName": _string("Database name"),
        },
        ["resourceGroup", "serverName", "databaseName"],
    ),
    _tool(
        "get_cost_estimate",
        "Estimate costs for current resources in resource group "
        f"(illustrative only: a flat ${DATABASE_MONTHLY_COST:.2f}/month per SQL database, "
        "not a live pricing lookup)",
        {"resourceGroup": _RESOURCE_GROUP},
        ["resourceGroup"],
    ),
)

_BY_NAME: Mapping[str, ToolDescriptor] = MappingProxyType({t.name: t for t in TOOL_CATALOG})


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_tools() -> tuple[ToolDescriptor, ...]:
    """Return every tool descriptor in registration order."""
    return TOOL_CATALOG


def get_tool(name: str) -> ToolDescriptor | None:
    return _BY_NAME.get(name)


def check_catalog(catalog: tuple[ToolDescriptor, ...] = TOOL_CATALOG) -> None:
    """Assert the schema invariants every descriptor must hold.

    Raises ``ValueError`` on the first violation: a duplicated name, a
    required property missing from ``properties``, or a required property
    that declares a default.
    """
    seen: set[str] = set()
    for tool in catalog:
        if tool.name in seen:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        seen.add(tool.name)
        for prop in tool.required:
            if prop not in tool.properties:
                raise ValueError(f"{tool.name}: required property '{prop}' is not declared")
            if "default" in tool.properties[prop]:
                raise ValueError(f"{tool.name}: required property '{prop}' must not have a default")
