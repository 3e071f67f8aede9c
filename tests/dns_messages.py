"""
tests/dns_messages.py

Helpers that build real dnspython messages and providers for the unit tests.
"""

from __future__ import annotations

import dns.message
import dns.rrset

from resolvers.echo_provider import PublicDnsProvider, QueryMethod


def make_answer(request: dns.message.Message, rdtype: str, *rdatas: str) -> dns.message.Message:
    """
    Builds a NOERROR response to `request` whose answer holds `rdatas`.

    TXT rdatas must be given in zone-file form, i.e. quoted: '"1.2.3.4"'.
    """
    response = dns.message.make_response(request)
    question = request.question[0]
    response.answer.append(
        dns.rrset.from_text(question.name, 60, question.rdclass, rdtype, *rdatas)
    )
    return response


def make_rcode(request: dns.message.Message, rcode: int) -> dns.message.Message:
    """Builds an empty response to `request` with the given rcode."""
    response = dns.message.make_response(request)
    response.set_rcode(rcode)
    return response


def fake_provider(
    name: str,
    method: QueryMethod = QueryMethod.TXT,
    servers: tuple[str, ...] = ("192.0.2.53",),
) -> PublicDnsProvider:
    """Returns a provider pointing at documentation-range servers."""
    return PublicDnsProvider(
        name=name,
        query_name=f"{name}.echo.test",
        servers=servers,
        method=method,
    )
