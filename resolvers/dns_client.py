"""
resolvers/dns_client.py

Responsibility: Defines the DnsClient Protocol and its dnspython-backed UDP
implementation. All DNS network I/O is concentrated here.
Does NOT: know about providers, decode answers, or choose fallbacks.
"""

from __future__ import annotations

import logging
from time import monotonic
from typing import Protocol, runtime_checkable

import dns.asyncquery
import dns.exception
import dns.message

from exceptions import ProviderTransportError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Abstract interface
# ---------------------------------------------------------------------------


@runtime_checkable
class DnsClient(Protocol):
    """
    Abstract protocol for sending one DNS query to one server.

    IpService depends on this abstraction so tests can substitute a fake
    that returns canned dns.message.Message objects.
    """

    async def query(
        self,
        request: dns.message.Message,
        server: str,
        port: int,
        timeout: float,
    ) -> dns.message.Message:
        """
        Sends `request` to `server:port` and returns the response.

        Args:
            request: The query message to send.
            server: IPv4 or IPv6 address of the DNS server.
            port: UDP/TCP port of the DNS server.
            timeout: Seconds to wait before giving up.

        Returns:
            The response message.

        Raises:
            ProviderTransportError: If no response could be obtained.
        """
        ...


# ---------------------------------------------------------------------------
# dnspython implementation
# ---------------------------------------------------------------------------


class UdpDnsClient:
    """
    Implements DnsClient over UDP with a TCP retry for truncated answers.

    The timeout covers the whole exchange: a TCP retry only gets whatever
    is left of it. Holds no sockets between calls: dnspython opens a socket
    per query and closes it on every exit path, including task
    cancellation, so one instance can be shared between concurrent lookups.
    """

    async def query(
        self,
        request: dns.message.Message,
        server: str,
        port: int,
        timeout: float,
    ) -> dns.message.Message:
        logger.debug("DNS query %s -> %s:%d", request.question[0], server, port)
        try:
            return await self._exchange(request, server, port, timeout)
        except dns.exception.Timeout as exc:
            raise ProviderTransportError(
                f"{server}:{port} did not answer within {timeout}s", timed_out=True
            ) from exc
        # dnspython's TCP reader raises a bare EOFError when the server hangs up
        except (OSError, EOFError) as exc:
            raise ProviderTransportError(f"Could not reach {server}:{port}: {exc}") from exc
        except dns.exception.DNSException as exc:
            raise ProviderTransportError(f"Bad exchange with {server}:{port}: {exc}") from exc

    async def _exchange(
        self,
        request: dns.message.Message,
        server: str,
        port: int,
        timeout: float,
    ) -> dns.message.Message:
        deadline = monotonic() + timeout
        try:
            return await dns.asyncquery.udp(
                request, server, timeout=timeout, port=port, raise_on_truncation=True
            )
        except dns.message.Truncated:
            remaining = deadline - monotonic()
            if remaining <= 0:
                raise dns.exception.Timeout(timeout=timeout)
            logger.debug("Answer from %s:%d was truncated; retrying over TCP", server, port)
            return await dns.asyncquery.tcp(request, server, timeout=remaining, port=port)
