"""DNS checks used to weed out submissions from made-up email domains."""

import logging
from typing import Optional

import dns.exception
import dns.resolver


class DomainResolver:
    """Looks up whether a domain can receive mail (has an MX or an A record)."""

    def __init__(self, resolver: Optional[dns.resolver.Resolver] = None, lifetime: float = 5.0):
        if resolver is None:
            resolver = dns.resolver.Resolver()
            resolver.lifetime = lifetime
        self.resolver = resolver

    def _has_record(self, domain: str, rdtype: str) -> bool:
        try:
            answers = self.resolver.resolve(domain, rdtype)
            return len(answers) > 0
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer, dns.resolver.NoNameservers):
            return False
        except dns.exception.Timeout:
            logging.warning(f"DNS {rdtype} lookup timed out for {domain}")
            return False
        except dns.exception.DNSException as e:
            logging.warning(f"DNS {rdtype} lookup failed for {domain}: {str(e)}")
            return False

    def has_mail_records(self, domain: str) -> bool:
        # No MX records, fall back to A record
        return self._has_record(domain, "MX") or self._has_record(domain, "A")


def get_domain_resolver() -> DomainResolver:
    """Dependency returning a resolver; tests override it with a fake."""
    return DomainResolver()
