"""
services/ip_service.py

Responsibility: Determines the current public IP address of the host machine
by asking public DNS echo providers, falling back through them in order.
Does NOT: send packets itself, decode DNS wire data, or cache results.
"""

from __future__ import annotations

import ipaddress
from typing import cast
import logging

from config import ResolverSettings
from exceptions import (
    AddressVersionError,
    ExhaustedError,
    ProviderAttempt,
    ProviderParseError,
    ProviderTransportError,
)
from resolvers.dns_client import DnsClient, UdpDnsClient
from resolvers.echo_provider import AddrVersion, IpAddress, PublicDnsProvider, decode_answer

logger = logging.getLogger(__name__)


class IpService:
    """
    Resolves the host machine's public IP address over DNS.

    Providers are tried strictly one after another, and within a provider
    each of its servers in turn; the first usable answer wins. Nothing is
    stored between calls, so one instance may serve concurrent lookups.

    Collaborators:
        - DnsClient: injected transport; defaults to UdpDnsClient
        - ResolverSettings: timeout, EDNS flag, default family and providers
    """

    def __init__(
        self,
        dns_client: DnsClient | None = None,
        settings: ResolverSettings | None = None,
    ) -> None:
        """
        Initialises the service.

        Args:
            dns_client: Transport used for every query. A fresh UdpDnsClient
                        is created when omitted.
            settings: Lookup settings. Defaults apply when omitted.
        """
        self._client = dns_client or UdpDnsClient()
        self._settings = settings or ResolverSettings()

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    async def resolve_public_address(self, version: AddrVersion | None = None) -> IpAddress:
        """
        Returns the public IP address of the host machine.

        Args:
            version: Restricts both the servers contacted and the accepted
                     answer to one family. Falls back to settings.version.
                     With ANY, an answer of either family is returned as-is.

        Returns:
            The address as an ipaddress.IPv4Address or IPv6Address.

        Raises:
            ExhaustedError: If no provider produced a usable address.
        """
        if version is None:
            version = self._settings.version
        attempts: list[ProviderAttempt] = []

        for provider in self._settings.providers:
            servers = provider.servers_for(version)
            if not servers:
                logger.debug("Skipping %s: no %s server.", provider.name, version.name)
                continue

            for server in servers:
                try:
                    address = await self._query_server(provider, server, version)
                except (ProviderTransportError, ProviderParseError, AddressVersionError) as exc:
                    logger.warning("Provider %s (%s) failed: %s", provider.name, server, exc)
                    attempts.append(ProviderAttempt(provider, server, exc))
                    continue

                logger.debug("Public IP via %s (%s): %s", provider.name, server, address)
                return address

        error = ExhaustedError(attempts)
        logger.error("Public IP lookup failed: %s", error)
        raise error from error.cause

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    async def _query_server(
        self,
        provider: PublicDnsProvider,
        server: str,
        version: AddrVersion,
    ) -> IpAddress:
        request = provider.make_query(self._settings.use_edns)
        response = await self._client.query(
            request, server, provider.port, self._settings.timeout
        )
        address = decode_answer(response, provider.method)
        if not version.matches(address):
            raise AddressVersionError(
                f"asked for IP{version.name.lower()}, got {address}"
            )
        return address


# ---------------------------------------------------------------------------
# Convenience coroutines
# ---------------------------------------------------------------------------


async def addr() -> IpAddress:
    """Returns the public address of either family using default settings."""
    return await IpService().resolve_public_address(AddrVersion.ANY)


async def addr_v4() -> ipaddress.IPv4Address:
    """Returns the public IPv4 address using default settings."""
    # Only IPv4 answers survive a V4 lookup
    address = await IpService().resolve_public_address(AddrVersion.V4)
    return cast(ipaddress.IPv4Address, address)


async def addr_v6() -> ipaddress.IPv6Address:
    """Returns the public IPv6 address using default settings."""
    address = await IpService().resolve_public_address(AddrVersion.V6)
    return cast(ipaddress.IPv6Address, address)
