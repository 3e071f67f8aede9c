"""
tests/conftest.py

Shared pytest fixtures used by the unit test suite.
All DNS traffic is replaced by canned dnspython messages — no real network
calls are made in any test.
"""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest


# ---------------------------------------------------------------------------
# DNS client fixture — stands in for UdpDnsClient
# ---------------------------------------------------------------------------


@pytest.fixture()
def dns_client():
    """
    Yields a factory for AsyncMock DnsClients keyed by server address.

    Each entry of `behaviours` maps a server to either a callable that takes
    the request and returns a response, or an exception instance to raise.
    Servers absent from the map raise AssertionError so unexpected traffic
    fails the test loudly.
    """

    def _factory(behaviours: dict[str, Callable | BaseException]) -> AsyncMock:
        async def _query(request, server, port, timeout):
            behaviour = behaviours.get(server)
            if behaviour is None:
                raise AssertionError(f"unexpected query to {server}")
            if isinstance(behaviour, BaseException):
                raise behaviour
            return behaviour(request)

        client = AsyncMock()
        client.query.side_effect = _query
        return client

    return _factory
