"""DNS record lookups backed by dnspython."""

from __future__ import annotations

from typing import List, Optional, Tuple

import dns.resolver
from dns.exception import DNSException
from dns.exception import Timeout as DnsTimeout


class DnsLookupError(Exception):
    """The resolver could not answer (timeout, no nameservers, ...)."""


def _parse_mx_rdata(rdata) -> Tuple[Optional[int], Optional[str]]:
    """
    Return (preference, host) from an MX rdata entry.

    Tolerates the different rdata shapes across dnspython versions.
    """
    pref = getattr(rdata, "preference", None)
    host = None
    exch = getattr(rdata, "exchange", None)
    if exch is not None:
        host = exch.to_text() if hasattr(exch, "to_text") else str(exch)

    if pref is None or host is None:
        parts = rdata.to_text().split()
        if len(parts) >= 2:
            try:
                pref = int(parts[0])
            except ValueError:
                pref = None
            host = parts[1]

    if host:
        host = host.rstrip(".")
    return pref, host


class DnsResolver:
    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout

    def has_record(self, domain: str, record_type: str = "MX") -> bool:
        """True if *domain* has at least one usable record of *record_type*.

        NXDOMAIN and empty answers return False; resolver failures raise DnsLookupError.
        """
        try:
            answers = dns.resolver.resolve(domain, record_type, lifetime=self.timeout)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return False
        except DnsTimeout as e:
            raise DnsLookupError(f"{record_type} lookup for {domain}: timeout") from e
        except DNSException as e:
            raise DnsLookupError(f"{record_type} lookup for {domain}: {e}") from e

        if record_type.upper() != "MX":
            return len(answers) > 0
        return bool(self.mx_hosts(answers))

    @staticmethod
    def mx_hosts(answers) -> List[str]:
        """MX hosts ordered by preference (best first)."""
        rows: List[Tuple[int, str]] = []
        for r in answers:
            pref, host = _parse_mx_rdata(r)
            if pref is not None and host:
                rows.append((pref, host))
        rows.sort(key=lambda t: t[0])
        return [host for _, host in rows]
