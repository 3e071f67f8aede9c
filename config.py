"""
config.py

Responsibility: Holds the in-process settings that shape a public IP lookup.
Does NOT: read files, read environment variables, or persist anything.
"""

from __future__ import annotations

from dataclasses import dataclass

from resolvers.echo_provider import DEFAULT_PROVIDERS, AddrVersion, PublicDnsProvider

# NOTE: applies to each server query separately, not to the whole lookup.
DEFAULT_QUERY_TIMEOUT = 3.0


@dataclass(frozen=True)
class ResolverSettings:
    """
    Immutable settings injected into IpService.

    Attributes:
        timeout: Seconds allowed for each individual server, TCP retry of a
                 truncated answer included. A lookup that exhausts every
                 provider can take up to timeout times the number of
                 servers tried (20 for the built-in table with ANY).
        use_edns: Whether queries carry an EDNS(0) OPT record.
        version: Default address family for resolve_public_address().
        providers: Providers tried in priority order.
    """

    timeout: float = DEFAULT_QUERY_TIMEOUT
    use_edns: bool = True
    version: AddrVersion = AddrVersion.ANY
    providers: tuple[PublicDnsProvider, ...] = DEFAULT_PROVIDERS

    def __post_init__(self) -> None:
        # Written so NaN is rejected too
        if not self.timeout > 0:
            raise ValueError(f"timeout must be positive, got {self.timeout!r}")
        # Accept any iterable of providers but store it immutably
        object.__setattr__(self, "providers", tuple(self.providers))
