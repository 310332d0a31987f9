"""
Tool handlers — one per catalog entry.

Each handler takes validated, defaulted arguments, calls the remote
operation facade (through the pagination adapter or LRO tracker where the
operation needs one), and returns the text shown to the caller. Output
embeds the identifying fields of the operation so it is stable and
diffable for identical backend responses.

Dispatch is an explicit if/elif chain keyed on the tool name.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from backend.facade import RemoteOperations
from gateway.catalog import DATABASE_MONTHLY_COST, DEFAULT_EDITION
from gateway.errors import UnknownToolError
from gateway.lro import submit_and_await
from gateway.pagination import drain
from gateway.serialization import to_json

logger = logging.getLogger("azure-gateway.handlers")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RESOURCE_GROUP_TAGS = {"purpose": "DP-300-Practice", "createdBy": "MCP"}

DATABASE_RESOURCE_TYPE = "Microsoft.Sql/servers/databases"

USAGE_METRICS = ("cpu_percent", "storage_percent", "connection_successful")
USAGE_WINDOW = timedelta(hours=1)
USAGE_INTERVAL = timedelta(minutes=5)

_BYTES_PER_GB = 1024 * 1024 * 1024


# ---------------------------------------------------------------------------
# Entity projections
# ---------------------------------------------------------------------------

def _sku_field(entity: Any, name: str) -> Any:
    sku = getattr(entity, "sku", None)
    return getattr(sku, name, None) if sku is not None else None


def _resource_group_summary(group: Any) -> dict:
    return {
        "name": group.name,
        "location": group.location,
        "tags": dict(group.tags) if group.tags else {},
    }


def _server_summary(server: Any) -> dict:
    return {
        "name": server.name,
        "location": server.location,
        "fullyQualifiedDomainName": server.fully_qualified_domain_name,
        "version": server.version,
        "state": server.state,
    }


def _database_summary(database: Any) -> dict:
    return {
        "name": database.name,
        "status": database.status,
        "edition": _sku_field(database, "tier"),
        "maxSizeBytes": database.max_size_bytes,
        "collation": database.collation,
    }


def _resource_summary(resource: Any) -> dict:
    return {
        "name": resource.name,
        "type": resource.type,
        "location": resource.location,
    }


def _latest_value(metric: Any) -> float | None:
    """Most recent non-empty data point of a metric (average, else total)."""
    latest = None
    for series in getattr(metric, "timeseries", None) or []:
        for point in getattr(series, "data", None) or []:
            value = point.average if point.average is not None else point.total
            if value is not None:
                latest = value
    return latest


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

class ToolHandlers:
    """Tool implementations bound to one remote operation facade."""

    def __init__(
        self,
        remote: RemoteOperations,
        max_list_items: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._remote = remote
        self._max_list_items = max_list_items
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def run(self, name: str, args: dict) -> str:
        """Run the handler for tool *name* with validated *args*."""
        if name == "list_resource_groups":
            return self.list_resource_groups()
        elif name == "create_resource_group":
            return self.create_resource_group(args["name"], args["location"])
        elif name == "delete_resource_group":
            return self.delete_resource_group(args["name"])
        elif name == "list_sql_servers":
            return self.list_sql_servers(args["resourceGroup"])
        elif name == "create_sql_server":
            return self.create_sql_server(
                args["resourceGroup"],
                args["serverName"],
                args["adminPassword"],
                location=args["location"],
                admin_user=args["adminUser"],
            )
        elif name == "list_sql_databases":
            return self.list_sql_databases(args["resourceGroup"], args["serverName"])
        elif name == "create_sql_database":
            return self.create_sql_database(
                args["resourceGroup"],
                args["serverName"],
                args["databaseName"],
                edition=args["edition"],
                sample_name=args["sampleName"],
            )
        elif name == "create_firewall_rule":
            return self.create_firewall_rule(
                args["resourceGroup"],
                args["serverName"],
                args["ruleName"],
                args["startIpAddress"],
                args["endIpAddress"],
            )
        elif name == "get_database_metrics":
            return self.get_database_metrics(
                args["resourceGroup"], args["serverName"], args["databaseName"]
            )
        elif name == "get_cost_estimate":
            return self.get_cost_estimate(args["resourceGroup"])
        else:
            raise UnknownToolError(name)

    def _drain(self, pages: Any, project: Callable[[Any], Any], description: str) -> list:
        return drain(pages, project=project, max_items=self._max_list_items, description=description)

    # -- Resource groups ----------------------------------------------------

    def list_resource_groups(self) -> str:
        groups = self._drain(
            self._remote.list_resource_groups(), _resource_group_summary, "List resource groups"
        )
        return to_json(groups)

    def create_resource_group(self, name: str, location: str) -> str:
        result = submit_and_await(
            lambda: self._remote.begin_create_resource_group(name, location, dict(RESOURCE_GROUP_TAGS)),
            f"Create resource group '{name}'",
        )
        return f"✓ Resource group '{name}' created in {location}\n{to_json(result)}"

    def delete_resource_group(self, name: str) -> str:
        submit_and_await(
            lambda: self._remote.begin_delete_resource_group(name),
            f"Delete resource group '{name}'",
        )
        return f"✓ Resource group '{name}' and all resources deleted"

    # -- SQL servers --------------------------------------------------------

    def list_sql_servers(self, resource_group: str) -> str:
        servers = self._drain(
            self._remote.list_servers(resource_group),
            _server_summary,
            f"List SQL servers in '{resource_group}'",
        )
        return to_json(servers)

    def create_sql_server(
        self,
        resource_group: str,
        server_name: str,
        admin_password: str,
        location: str,
        admin_user: str,
    ) -> str:
        server = submit_and_await(
            lambda: self._remote.begin_create_server(
                resource_group, server_name, location, admin_user, admin_password
            ),
            f"Create SQL server '{server_name}'",
        )
        fqdn = getattr(server, "fully_qualified_domain_name", None)
        return f"✓ SQL Server '{server_name}' created\nFQDN: {fqdn}\n{to_json(server)}"

    # -- SQL databases ------------------------------------------------------

    def list_sql_databases(self, resource_group: str, server_name: str) -> str:
        databases = self._drain(
            self._remote.list_databases(resource_group, server_name),
            _database_summary,
            f"List databases on '{server_name}'",
        )
        return to_json(databases)

    def create_sql_database(
        self,
        resource_group: str,
        server_name: str,
        database_name: str,
        edition: str,
        sample_name: str,
    ) -> str:
        # Databases are created in the server's region.
        server = self._remote.get_server(resource_group, server_name)
        sku_name = "Basic" if edition == DEFAULT_EDITION else "S0"
        database = submit_and_await(
            lambda: self._remote.begin_create_database(
                resource_group,
                server_name,
                database_name,
                location=server.location,
                sku_name=sku_name,
                tier=edition,
                sample_name=sample_name or None,
            ),
            f"Create database '{database_name}'",
        )
        return f"✓ Database '{database_name}' created on {server_name}\n{to_json(database)}"

    # -- Firewall rules -----------------------------------------------------

    def create_firewall_rule(
        self,
        resource_group: str,
        server_name: str,
        rule_name: str,
        start_ip_address: str,
        end_ip_address: str,
    ) -> str:
        self._remote.create_firewall_rule(
            resource_group, server_name, rule_name, start_ip_address, end_ip_address
        )
        return f"✓ Firewall rule '{rule_name}' created: {start_ip_address} - {end_ip_address}"

    # -- Metrics ------------------------------------------------------------

    def get_database_metrics(self, resource_group: str, server_name: str, database_name: str) -> str:
        database = self._remote.get_database(resource_group, server_name, database_name)

        max_size = database.max_size_bytes
        creation_date = database.creation_date
        metrics = {
            "status": database.status,
            "tier": _sku_field(database, "tier"),
            "capacity": _sku_field(database, "capacity"),
            "maxSizeGB": f"{max_size / _BYTES_PER_GB:.2f}" if max_size else "N/A",
            "collation": database.collation,
            "creationDate": creation_date,
            "usage": self._usage(database),
        }
        return f"Database Metrics for {database_name}:\n{to_json(metrics)}"

    def _usage(self, database: Any) -> dict:
        resource_id = getattr(database, "id", None)
        if not resource_id:
            return {}
        end = self._clock()
        timespan = f"{(end - USAGE_WINDOW).isoformat()}/{end.isoformat()}"
        response = self._remote.list_metrics(resource_id, USAGE_METRICS, timespan, USAGE_INTERVAL)
        usage = {}
        for metric in getattr(response, "value", None) or []:
            metric_name = getattr(metric.name, "value", None) or str(metric.name)
            usage[metric_name] = _latest_value(metric)
        return usage

    # -- Cost ---------------------------------------------------------------

    def get_cost_estimate(self, resource_group: str) -> str:
        resources = self._drain(
            self._remote.list_resources(resource_group),
            _resource_summary,
            f"List resources in '{resource_group}'",
        )
        database_count = sum(
            1 for r in resources if (r["type"] or "").lower() == DATABASE_RESOURCE_TYPE.lower()
        )
        estimated = database_count * DATABASE_MONTHLY_COST
        logger.debug("Cost estimate for %s: %d databases", resource_group, database_count)
        return (
            f"Resources in '{resource_group}':\n{to_json(resources)}\n\n"
            f"Estimated Monthly Cost: ${estimated:.2f}\n"
            f"(Illustrative estimate: a flat ${DATABASE_MONTHLY_COST:.2f}/month per SQL database; "
            "other resource types are not priced. Not a live pricing lookup.)"
        )
