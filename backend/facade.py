"""
Remote operation facade — the surface the tool handlers call.

``AzureOperations`` implements it against the Azure management SDKs; tests
substitute a fake. List methods return lazy iterables that the pagination
adapter drains; ``begin_*`` methods return pollers that the LRO tracker
drives to completion.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Iterable, Protocol, Sequence


class Poller(Protocol):
    def result(self, timeout: float | None = None) -> Any: ...

    def status(self) -> str: ...

    def done(self) -> bool: ...


class RemoteOperations(Protocol):
    # Resource groups
    def list_resource_groups(self) -> Iterable[Any]: ...

    def begin_create_resource_group(self, name: str, location: str, tags: dict[str, str]) -> Poller: ...

    def begin_delete_resource_group(self, name: str) -> Poller: ...

    def list_resources(self, resource_group: str) -> Iterable[Any]: ...

    # SQL servers
    def list_servers(self, resource_group: str) -> Iterable[Any]: ...

    def get_server(self, resource_group: str, server_name: str) -> Any: ...

    def begin_create_server(
        self,
        resource_group: str,
        server_name: str,
        location: str,
        admin_user: str,
        admin_password: str,
    ) -> Poller: ...

    # SQL databases
    def list_databases(self, resource_group: str, server_name: str) -> Iterable[Any]: ...

    def get_database(self, resource_group: str, server_name: str, database_name: str) -> Any: ...

    def begin_create_database(
        self,
        resource_group: str,
        server_name: str,
        database_name: str,
        location: str,
        sku_name: str,
        tier: str,
        sample_name: str | None = None,
    ) -> Poller: ...

    # Firewall rules
    def create_firewall_rule(
        self,
        resource_group: str,
        server_name: str,
        rule_name: str,
        start_ip_address: str,
        end_ip_address: str,
    ) -> Any: ...

    # Metrics
    def list_metrics(
        self,
        resource_uri: str,
        metric_names: Sequence[str],
        timespan: str,
        interval: timedelta,
    ) -> Any: ...
