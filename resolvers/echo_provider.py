"""
resolvers/echo_provider.py

Responsibility: Defines the PublicDnsProvider descriptor, the built-in table
of DNS echo services, and the pure rule that turns a DNS answer into an IP
address.
Does NOT: open sockets, send queries, or decide which provider to try next.
"""

from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass

import dns.message
import dns.rcode
import dns.rdataclass
import dns.rdatatype

from exceptions import ProviderParseError

IpAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

DEFAULT_DNS_PORT = 53


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class QueryMethod(enum.Enum):
    """How a provider encodes the caller's address in its answer."""

    # The first A record is the address.
    A = "A"
    # The first AAAA record is the address.
    AAAA = "AAAA"
    # The first TXT string is the address as plain text.
    TXT = "TXT"


class AddrVersion(enum.Enum):
    """The IP family a caller wants resolved."""

    V4 = 4
    V6 = 6
    ANY = 0

    def matches(self, address: IpAddress) -> bool:
        """Returns True if `address` belongs to this family (always for ANY)."""
        return self is AddrVersion.ANY or address.version == self.value


# ---------------------------------------------------------------------------
# Value object
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PublicDnsProvider:
    """
    Static descriptor of one DNS service that echoes the client's address.

    Instances are immutable and shared freely between concurrent lookups.
    """

    # Short label used in logs and errors, e.g. "opendns-v4"
    name: str

    # Name to query, e.g. "myip.opendns.com"
    query_name: str

    # Resolver addresses tried in order
    servers: tuple[str, ...]

    method: QueryMethod

    # Cloudflare answers whoami queries in the CHAOS class only
    rdclass: dns.rdataclass.RdataClass = dns.rdataclass.IN

    port: int = DEFAULT_DNS_PORT

    @property
    def record_type(self) -> dns.rdatatype.RdataType:
        return dns.rdatatype.from_text(self.method.value)

    def servers_for(self, version: AddrVersion) -> list[str]:
        """
        Returns the servers reachable over the requested IP family.

        Args:
            version: The family the caller wants; ANY keeps every server.

        Returns:
            Server addresses in declared order, possibly empty.
        """
        return [
            server for server in self.servers
            if version.matches(ipaddress.ip_address(server))
        ]

    def make_query(self, use_edns: bool = True) -> dns.message.Message:
        """Builds a fresh query message for this provider."""
        return dns.message.make_query(
            self.query_name,
            self.record_type,
            self.rdclass,
            use_edns=use_edns,
        )


# ---------------------------------------------------------------------------
# Built-in providers
# ---------------------------------------------------------------------------

OPENDNS_V4 = PublicDnsProvider(
    name="opendns-v4",
    query_name="myip.opendns.com",
    servers=("208.67.222.222", "208.67.220.220", "208.67.222.220", "208.67.220.222"),
    method=QueryMethod.A,
)

OPENDNS_V6 = PublicDnsProvider(
    name="opendns-v6",
    query_name="myip.opendns.com",
    servers=("2620:0:ccc::2", "2620:0:ccd::2"),
    method=QueryMethod.AAAA,
)

# NOTE: ns1..ns4.google.com are authoritative for myaddr.l.google.com.
GOOGLE_V4 = PublicDnsProvider(
    name="google-v4",
    query_name="o-o.myaddr.l.google.com",
    servers=("216.239.32.10", "216.239.34.10", "216.239.36.10", "216.239.38.10"),
    method=QueryMethod.TXT,
)

GOOGLE_V6 = PublicDnsProvider(
    name="google-v6",
    query_name="o-o.myaddr.l.google.com",
    servers=(
        "2001:4860:4802:32::a",
        "2001:4860:4802:34::a",
        "2001:4860:4802:36::a",
        "2001:4860:4802:38::a",
    ),
    method=QueryMethod.TXT,
)

CLOUDFLARE_V4 = PublicDnsProvider(
    name="cloudflare-v4",
    query_name="whoami.cloudflare",
    servers=("1.1.1.1", "1.0.0.1"),
    method=QueryMethod.TXT,
    rdclass=dns.rdataclass.CH,
)

CLOUDFLARE_V6 = PublicDnsProvider(
    name="cloudflare-v6",
    query_name="whoami.cloudflare",
    servers=("2606:4700:4700::1111", "2606:4700:4700::1001"),
    method=QueryMethod.TXT,
    rdclass=dns.rdataclass.CH,
)

DEFAULT_PROVIDERS: tuple[PublicDnsProvider, ...] = (
    OPENDNS_V4,
    OPENDNS_V6,
    GOOGLE_V4,
    GOOGLE_V6,
    CLOUDFLARE_V4,
    CLOUDFLARE_V6,
)


# ---------------------------------------------------------------------------
# Decode rule
# ---------------------------------------------------------------------------


def decode_answer(response: dns.message.Message, method: QueryMethod) -> IpAddress:
    """
    Extracts the echoed client address from a provider's response.

    Only the first record of the answer section is considered.

    Args:
        response: The DNS response returned by the provider.
        method: The provider's encoding of the address.

    Returns:
        The parsed IPv4Address or IPv6Address.

    Raises:
        ProviderParseError: If the response carries no usable address.
    """
    rcode = response.rcode()
    if rcode != dns.rcode.NOERROR:
        raise ProviderParseError(f"server answered {dns.rcode.to_text(rcode)}")

    if not response.answer or len(response.answer[0]) == 0:
        raise ProviderParseError("response has no answer records")

    rrset = response.answer[0]
    expected = dns.rdatatype.from_text(method.value)
    if rrset.rdtype != expected:
        raise ProviderParseError(
            f"expected {method.value} record, got {dns.rdatatype.to_text(rrset.rdtype)}"
        )

    rdata = rrset[0]
    if method is QueryMethod.TXT:
        return _parse_txt(rdata.strings)
    # A and AAAA rdata already hold a validated address of the right family
    return ipaddress.ip_address(rdata.address)


def _parse_txt(strings: tuple[bytes, ...]) -> IpAddress:
    if not strings or not strings[0]:
        raise ProviderParseError("TXT record is empty")
    try:
        text = strings[0].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProviderParseError("TXT record is not valid UTF-8") from exc
    try:
        return ipaddress.ip_address(text.strip())
    except ValueError as exc:
        raise ProviderParseError(f"TXT record is not an IP address: {text!r}") from exc
