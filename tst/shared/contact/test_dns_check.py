import dns.exception
import dns.resolver

from src.shared.contact.dns_check import DomainResolver


def fake_resolve(answers):
    """Build a resolve() that answers per record type, raising when given an exception."""
    asked = []

    def resolve(domain, rdtype):
        asked.append((domain, rdtype))
        result = answers.get(rdtype, dns.resolver.NoAnswer())
        if isinstance(result, Exception):
            raise result
        return result

    resolve.asked = asked
    return resolve


class StubResolver:
    def __init__(self, resolve):
        self.resolve = resolve


def test_mx_record_is_enough():
    resolve = fake_resolve({"MX": ["mx1.example.com."]})
    resolver = DomainResolver(resolver=StubResolver(resolve))

    assert resolver.has_mail_records("example.com") is True
    assert resolve.asked == [("example.com", "MX")]


def test_falls_back_to_a_record():
    resolve = fake_resolve({"A": ["93.184.216.34"]})
    resolver = DomainResolver(resolver=StubResolver(resolve))

    assert resolver.has_mail_records("example.com") is True
    assert resolve.asked == [("example.com", "MX"), ("example.com", "A")]


def test_nonexistent_domain():
    resolver = DomainResolver(resolver=StubResolver(fake_resolve({
        "MX": dns.resolver.NXDOMAIN(),
        "A": dns.resolver.NXDOMAIN(),
    })))

    assert resolver.has_mail_records("nowhere.example") is False


def test_timeout_counts_as_unresolvable():
    resolver = DomainResolver(resolver=StubResolver(fake_resolve({
        "MX": dns.exception.Timeout(),
        "A": dns.exception.Timeout(),
    })))

    assert resolver.has_mail_records("slow.example") is False
