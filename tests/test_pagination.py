"""
Tests for gateway.pagination — eager draining of lazy listings.
"""

import os
import sys
from types import SimpleNamespace

import pytest
from azure.core.exceptions import HttpResponseError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gateway.errors import ErrorKind, ListingTooLargeError, RemoteRejectionError
from gateway.pagination import drain


def _pages(*items):
    """A one-shot generator, like an Azure ItemPaged."""
    for item in items:
        yield item


def _failing_pages(good, exc):
    for item in good:
        yield item
    raise exc


class TestDrain:

    def test_preserves_backend_order(self):
        assert drain(_pages("c", "a", "b")) == ["c", "a", "b"]

    def test_empty_listing(self):
        assert drain(_pages()) == []

    def test_projection_applied(self):
        entities = _pages(SimpleNamespace(name="one"), SimpleNamespace(name="two"))
        assert drain(entities, project=lambda e: e.name) == ["one", "two"]

    def test_consumes_generator_fully(self):
        gen = _pages(1, 2, 3)
        drain(gen)
        assert list(gen) == []

    def test_at_limit_is_allowed(self):
        assert drain(_pages(1, 2, 3), max_items=3) == [1, 2, 3]

    def test_over_limit_aborts(self):
        with pytest.raises(ListingTooLargeError, match="more than 2 items") as exc_info:
            drain(_pages(1, 2, 3), max_items=2, description="List things")
        assert exc_info.value.kind is ErrorKind.REMOTE_REJECTION

    def test_limit_guards_unbounded_source(self):
        def endless():
            n = 0
            while True:
                n += 1
                yield n

        with pytest.raises(ListingTooLargeError):
            drain(endless(), max_items=100)

    def test_mid_listing_failure_is_one_error(self):
        pages = _failing_pages([1, 2], HttpResponseError(message="page 2 failed"))
        with pytest.raises(RemoteRejectionError) as exc_info:
            drain(pages, description="List servers")
        message = str(exc_info.value)
        assert "List servers failed after 2 items" in message
        assert "page 2 failed" in message
        assert isinstance(exc_info.value.__cause__, HttpResponseError)

    def test_non_azure_errors_propagate_unchanged(self):
        with pytest.raises(KeyError):
            drain(_failing_pages([1], KeyError("boom")))
