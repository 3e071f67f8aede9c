"""
exceptions.py

Responsibility: Defines all custom exception classes used across the package.
Does NOT: contain business logic, logging, or DNS handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resolvers.echo_provider import PublicDnsProvider


class ResolveError(Exception):
    """
    Base class for every error raised while discovering the public IP.

    Callers that do not care about the failure kind can catch this alone.
    """


class ProviderTransportError(ResolveError):
    """
    Raised by a DnsClient when a query never produced a response.

    Covers unreachable servers, socket send/receive errors and timeouts.
    """

    def __init__(self, message: str, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


class ProviderParseError(ResolveError):
    """
    Raised when a response arrived but did not carry a usable address.

    This may be an error rcode, an empty answer section, a record of the
    wrong type, or a TXT payload that is not an IP address.
    """


class AddressVersionError(ResolveError):
    """
    Raised when a provider answered with an address of the wrong family
    for an explicit IPv4-only or IPv6-only request.
    """


@dataclass(frozen=True)
class ProviderAttempt:
    """One failed query against a single server of a provider."""

    provider: PublicDnsProvider
    server: str
    error: ResolveError


class ExhaustedError(ResolveError):
    """
    Raised by IpService when every configured provider has failed.

    Attributes:
        attempts: Every failed (provider, server, error) triple, in order.
        cause: The most informative underlying failure, or None when no
               server was contacted at all.
    """

    def __init__(self, attempts: list[ProviderAttempt]) -> None:
        self.attempts = list(attempts)
        self.cause = _most_informative(self.attempts)
        if self.cause is None:
            message = "no public DNS provider could be queried"
        else:
            message = f"all public DNS providers failed; last relevant error: {self.cause}"
        super().__init__(message)


def _most_informative(attempts: list[ProviderAttempt]) -> ResolveError | None:
    # A received-but-unusable response says more than a socket error.
    for attempt in reversed(attempts):
        if not isinstance(attempt.error, ProviderTransportError):
            return attempt.error
    if attempts:
        return attempts[-1].error
    return None
