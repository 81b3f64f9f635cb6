"""Domain name shape checks."""

import re
from typing import Optional

MAX_DOMAIN_LENGTH = 253

_DOMAIN_RE = re.compile(
    r"^(?=.{1,253}$)(?:(?!-)[A-Za-z0-9-]{1,63}(?<!-)\.)+"
    r"(?:[A-Za-z]{2,63}|[Xx][Nn]--[A-Za-z0-9-]{1,59})$"
)


def is_valid_domain(domain: Optional[str]) -> bool:
    """True for names like ``sub.example.com`` or ``xn--d1acj3b.xn--p1ai``.

    Rejects ``-a.com``, ``a..com`` and ``localhost``.
    """
    if not domain:
        return False
    domain = domain.strip()
    if len(domain) > MAX_DOMAIN_LENGTH:
        return False
    return _DOMAIN_RE.match(domain) is not None


def extract_domain(email: str) -> Optional[str]:
    """Part after the last ``@``, or None when there is none."""
    if "@" not in email:
        return None
    return email.rsplit("@", 1)[1]
