"""
Azure implementation of the remote operation facade.

Thin wrappers over the Azure management SDK clients. Every method is a
single, literal SDK call; nothing here retries, caches, or interprets
results. SDK exceptions (``azure.core.exceptions.AzureError`` and
subclasses) propagate to the gateway, which classifies them.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Iterable, Sequence

from azure.identity import ClientSecretCredential
from azure.mgmt.monitor import MonitorManagementClient
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.resource.resources.models import ResourceGroup
from azure.mgmt.sql import SqlManagementClient
from azure.mgmt.sql.models import Database, FirewallRule, Server, Sku

from gateway.config import GatewayConfig

logger = logging.getLogger("azure-gateway.backend")

SQL_SERVER_VERSION = "12.0"


class CompletedPoller:
    """Poller for an operation the service finishes synchronously.

    Resource-group create/update is not long-running on ARM; wrapping its
    result lets every create path go through the same LRO tracker.
    """

    def __init__(self, result: Any) -> None:
        self._result = result

    def result(self, timeout: float | None = None) -> Any:
        return self._result

    def status(self) -> str:
        return "Succeeded"

    def done(self) -> bool:
        return True

    def wait(self, timeout: float | None = None) -> None:
        return None


class AzureOperations:
    """Remote operations backed by the Azure Resource Manager APIs."""

    def __init__(
        self,
        resource_client: ResourceManagementClient,
        sql_client: SqlManagementClient,
        monitor_client: MonitorManagementClient,
    ) -> None:
        self._resources = resource_client
        self._sql = sql_client
        self._monitor = monitor_client

    # -- Resource groups ----------------------------------------------------

    def list_resource_groups(self) -> Iterable[Any]:
        return self._resources.resource_groups.list()

    def begin_create_resource_group(self, name: str, location: str, tags: dict[str, str]) -> CompletedPoller:
        group = self._resources.resource_groups.create_or_update(
            name, ResourceGroup(location=location, tags=tags)
        )
        return CompletedPoller(group)

    def begin_delete_resource_group(self, name: str) -> Any:
        return self._resources.resource_groups.begin_delete(name)

    def list_resources(self, resource_group: str) -> Iterable[Any]:
        return self._resources.resources.list_by_resource_group(resource_group)

    # -- SQL servers --------------------------------------------------------

    def list_servers(self, resource_group: str) -> Iterable[Any]:
        return self._sql.servers.list_by_resource_group(resource_group)

    def get_server(self, resource_group: str, server_name: str) -> Any:
        return self._sql.servers.get(resource_group, server_name)

    def begin_create_server(
        self,
        resource_group: str,
        server_name: str,
        location: str,
        admin_user: str,
        admin_password: str,
    ) -> Any:
        return self._sql.servers.begin_create_or_update(
            resource_group,
            server_name,
            Server(
                location=location,
                administrator_login=admin_user,
                administrator_login_password=admin_password,
                version=SQL_SERVER_VERSION,
            ),
        )

    # -- SQL databases ------------------------------------------------------

    def list_databases(self, resource_group: str, server_name: str) -> Iterable[Any]:
        return self._sql.databases.list_by_server(resource_group, server_name)

    def get_database(self, resource_group: str, server_name: str, database_name: str) -> Any:
        return self._sql.databases.get(resource_group, server_name, database_name)

    def begin_create_database(
        self,
        resource_group: str,
        server_name: str,
        database_name: str,
        location: str,
        sku_name: str,
        tier: str,
        sample_name: str | None = None,
    ) -> Any:
        parameters = Database(location=location, sku=Sku(name=sku_name, tier=tier))
        if sample_name:
            parameters.sample_name = sample_name
        return self._sql.databases.begin_create_or_update(
            resource_group, server_name, database_name, parameters
        )

    # -- Firewall rules -----------------------------------------------------

    def create_firewall_rule(
        self,
        resource_group: str,
        server_name: str,
        rule_name: str,
        start_ip_address: str,
        end_ip_address: str,
    ) -> Any:
        return self._sql.firewall_rules.create_or_update(
            resource_group,
            server_name,
            rule_name,
            FirewallRule(start_ip_address=start_ip_address, end_ip_address=end_ip_address),
        )

    # -- Metrics ------------------------------------------------------------

    def list_metrics(
        self,
        resource_uri: str,
        metric_names: Sequence[str],
        timespan: str,
        interval: timedelta,
    ) -> Any:
        return self._monitor.metrics.list(
            resource_uri,
            timespan=timespan,
            interval=interval,
            metricnames=",".join(metric_names),
            aggregation="Average,Total",
        )


def create_azure_operations(config: GatewayConfig) -> AzureOperations:
    """Build the process-wide credential and SDK clients from *config*."""
    credential = ClientSecretCredential(
        tenant_id=config.tenant_id,
        client_id=config.client_id,
        client_secret=config.client_secret,
    )
    logger.info("Azure clients created for subscription %s", config.subscription_id)
    return AzureOperations(
        resource_client=ResourceManagementClient(credential, config.subscription_id),
        sql_client=SqlManagementClient(credential, config.subscription_id),
        monitor_client=MonitorManagementClient(credential, config.subscription_id),
    )
