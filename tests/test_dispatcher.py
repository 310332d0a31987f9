"""
Tests for gateway.dispatcher — routing, validation, and error framing.

Covers:
  - list_tools returns the full catalog
  - Unknown tools and validation failures produce error envelopes and make
    no remote call
  - Backend rejections, LRO failures, and unexpected faults are all framed
    as error envelopes with a message and a trace
  - The dispatcher stays usable after every kind of failure
"""

import json
import logging
import os
import sys
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gateway.catalog import TOOL_CATALOG, ToolDescriptor
from gateway.dispatcher import Dispatcher, _classify, _invoke
from gateway.envelope import Failure, Success
from gateway.errors import ErrorKind, OperationFailedError, ValidationError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _Poller:
    def __init__(self, result=None, status="Succeeded", error=None):
        self._result = result
        self._status = status
        self._error = error

    def result(self, timeout=None):
        if self._error is not None:
            raise self._error
        return self._result

    def status(self):
        return self._status

    def done(self):
        return True


def _remote():
    remote = MagicMock()
    remote.list_resource_groups.return_value = iter([])
    remote.begin_create_resource_group.side_effect = lambda name, location, tags: _Poller(
        result={"name": name, "location": location, "tags": tags}
    )
    return remote


def _error_message(envelope) -> str:
    text = envelope.content[0].text
    assert text.startswith("Error: ")
    return text.split("\n", 1)[0][len("Error: "):]


# =========================================================================
# Tests: list_tools
# =========================================================================

class TestListTools:

    def test_returns_catalog(self):
        assert Dispatcher(_remote()).list_tools() == TOOL_CATALOG

    def test_listing_makes_no_remote_calls(self):
        remote = _remote()
        Dispatcher(remote).list_tools()
        assert remote.mock_calls == []

    def test_malformed_catalog_rejected_at_construction(self):
        bad = ToolDescriptor(
            name="bad",
            description="bad",
            input_schema={"type": "object", "properties": {}, "required": ["x"]},
        )
        with pytest.raises(ValueError, match="not declared"):
            Dispatcher(_remote(), catalog=(bad,))

    def test_duplicate_tool_in_catalog_rejected_at_construction(self):
        tool = TOOL_CATALOG[0]
        with pytest.raises(ValueError, match="Duplicate"):
            Dispatcher(_remote(), catalog=(tool, tool))


# =========================================================================
# Tests: success path
# =========================================================================

class TestSuccess:

    def test_empty_resource_group_listing(self):
        envelope = Dispatcher(_remote()).call_tool("list_resource_groups", {})
        assert envelope.is_error is False
        assert envelope.to_dict() == {"content": [{"type": "text", "text": "[]"}]}

    def test_default_location_applied(self):
        remote = _remote()
        envelope = Dispatcher(remote).call_tool("create_resource_group", {"name": "t1"})
        assert envelope.is_error is False
        assert remote.begin_create_resource_group.call_args.args[:2] == ("t1", "eastus")
        assert envelope.text.startswith("✓ Resource group 't1' created in eastus")

    def test_none_arguments_accepted(self):
        envelope = Dispatcher(_remote()).call_tool("list_resource_groups", None)
        assert envelope.is_error is False

    def test_cost_estimate_two_databases(self):
        remote = _remote()
        remote.list_resources.return_value = iter([
            SimpleNamespace(name="db1", type="Microsoft.Sql/servers/databases", location="eastus"),
            SimpleNamespace(name="db2", type="Microsoft.Sql/servers/databases", location="eastus"),
            SimpleNamespace(name="srv", type="Microsoft.Sql/servers", location="eastus"),
        ])
        envelope = Dispatcher(remote).call_tool("get_cost_estimate", {"resourceGroup": "rg"})
        assert "Estimated Monthly Cost: $10.00" in envelope.text

    def test_max_list_items_passed_to_handlers(self):
        remote = _remote()
        remote.list_servers.return_value = iter(
            SimpleNamespace(name=f"s{i}", location="l", fully_qualified_domain_name="f", version="12.0", state="Ready")
            for i in range(3)
        )
        envelope = Dispatcher(remote, max_list_items=2).call_tool("list_sql_servers", {"resourceGroup": "rg"})
        assert envelope.is_error is True
        assert "more than 2 items" in envelope.text


# =========================================================================
# Tests: error framing
# =========================================================================

class TestErrors:

    def test_unknown_tool(self):
        remote = _remote()
        envelope = Dispatcher(remote).call_tool("drop_everything", {})
        assert envelope.is_error is True
        assert _error_message(envelope) == "Unknown tool: drop_everything"
        assert envelope.to_dict()["isError"] is True
        assert remote.mock_calls == []

    def test_unknown_tool_then_next_call_succeeds(self):
        dispatcher = Dispatcher(_remote())
        assert dispatcher.call_tool("nope", {}).is_error is True
        assert dispatcher.call_tool("list_resource_groups", {}).is_error is False

    @pytest.mark.parametrize("tool", [t for t in TOOL_CATALOG if t.required])
    def test_missing_required_argument_makes_no_remote_call(self, tool):
        remote = _remote()
        envelope = Dispatcher(remote).call_tool(tool.name, {})
        assert envelope.is_error is True
        assert _error_message(envelope) == f"Missing required argument: {tool.required[0]}"
        assert "ValidationError" in envelope.text
        assert remote.mock_calls == []

    def test_remote_rejection(self):
        remote = _remote()
        remote.create_firewall_rule.side_effect = HttpResponseError(message="Invalid IP address")
        envelope = Dispatcher(remote).call_tool("create_firewall_rule", {
            "resourceGroup": "rg", "serverName": "srv", "ruleName": "r",
            "startIpAddress": "x", "endIpAddress": "y",
        })
        assert envelope.is_error is True
        assert _error_message(envelope) == "Invalid IP address"
        assert "Traceback" in envelope.text

    def test_lro_failure_has_no_success_text_and_no_compensation(self):
        remote = _remote()
        remote.get_server.return_value = SimpleNamespace(location="eastus")
        remote.begin_create_database.return_value = _Poller(
            status="Failed", error=HttpResponseError(message="Database quota exceeded")
        )
        envelope = Dispatcher(remote).call_tool("create_sql_database", {
            "resourceGroup": "rg", "serverName": "srv", "databaseName": "db",
        })
        assert envelope.is_error is True
        assert "✓" not in envelope.text
        assert "Database quota exceeded" in envelope.text
        called = [c[0] for c in remote.mock_calls]
        assert called == ["get_server", "begin_create_database"]

    def test_unexpected_fault_is_framed_and_logged(self, caplog):
        remote = _remote()
        remote.get_database.side_effect = ZeroDivisionError("division by zero")
        with caplog.at_level(logging.ERROR, logger="azure-gateway.dispatcher"):
            envelope = Dispatcher(remote).call_tool("get_database_metrics", {
                "resourceGroup": "rg", "serverName": "srv", "databaseName": "db",
            })
        assert envelope.is_error is True
        assert _error_message(envelope) == "division by zero"
        assert "ZeroDivisionError" in envelope.text
        assert any("Unexpected fault" in r.message for r in caplog.records)

    def test_session_survives_every_failure_kind(self):
        remote = _remote()
        remote.list_servers.side_effect = HttpResponseError(message="denied")
        remote.begin_delete_resource_group.return_value = _Poller(status="Failed")
        remote.get_database.side_effect = RuntimeError("boom")
        dispatcher = Dispatcher(remote)

        assert dispatcher.call_tool("nope").is_error
        assert dispatcher.call_tool("list_sql_servers", {}).is_error
        assert dispatcher.call_tool("list_sql_servers", {"resourceGroup": "rg"}).is_error
        assert dispatcher.call_tool("delete_resource_group", {"name": "rg"}).is_error
        assert dispatcher.call_tool("get_database_metrics", {
            "resourceGroup": "rg", "serverName": "s", "databaseName": "d",
        }).is_error

        envelope = dispatcher.call_tool("create_resource_group", {"name": "after"})
        assert envelope.is_error is False
        assert "'after' created in eastus" in envelope.text

    def test_arguments_never_logged(self, caplog):
        remote = _remote()
        remote.begin_create_server.return_value = _Poller(status="Failed", error=HttpResponseError(message="no"))
        with caplog.at_level(logging.DEBUG):
            Dispatcher(remote).call_tool("create_sql_server", {
                "resourceGroup": "rg", "serverName": "srv", "adminPassword": "S3cret!Pass",
            })
        assert "S3cret!Pass" not in caplog.text


# =========================================================================
# Tests: outcome classification
# =========================================================================

class TestClassification:

    def test_gateway_errors_carry_their_kind(self):
        assert _classify(ValidationError("x")) is ErrorKind.VALIDATION
        assert _classify(OperationFailedError("x")) is ErrorKind.OPERATION_FAILED

    def test_azure_errors_are_remote_rejections(self):
        assert _classify(HttpResponseError(message="x")) is ErrorKind.REMOTE_REJECTION

    def test_other_errors_are_unexpected(self):
        assert _classify(KeyError("x")) is ErrorKind.UNEXPECTED

    def test_invoke_success(self):
        assert _invoke(lambda: 42) == Success(42)

    def test_invoke_failure_has_trace(self):
        def fail():
            raise ValidationError("Missing required argument: name")

        outcome = _invoke(fail)
        assert isinstance(outcome, Failure)
        assert outcome.kind is ErrorKind.VALIDATION
        assert outcome.message == "Missing required argument: name"
        assert "Traceback" in outcome.trace

    def test_empty_message_falls_back_to_type_name(self):
        def fail():
            raise RuntimeError()

        assert _invoke(fail).message == "RuntimeError"
