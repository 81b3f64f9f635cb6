"""
Pluggable address checks.

Every check answers ``validate(email) -> bool`` and reports a severity
coefficient in [0, 1] used when it fails. Checks receive all collaborators
(logger included) at construction and are never rebuilt afterwards.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

from email_validator import EmailNotValidError, validate_email

from .domain import extract_domain, is_valid_domain
from .errors import ConfigurationError
from .resolver import DnsLookupError, DnsResolver

DEFAULT_DISPOSABLE_DOMAINS = frozenset(
    {
        "10minutemail.com",
        "dispostable.com",
        "getnada.com",
        "guerrillamail.com",
        "mailinator.com",
        "temp-mail.org",
        "tempmail.com",
        "tempmail.net",
        "trashmail.com",
        "yopmail.com",
    }
)


class Check(ABC):
    coefficient: float = 1.0

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger

    @property
    def label(self) -> str:
        return type(self).__name__

    @abstractmethod
    def validate(self, email: str) -> bool:
        """Return True if *email* passes this check."""

    def error_coefficient(self) -> float:
        return self.coefficient


def syntax_error(email: str) -> Optional[str]:
    """Why *email* is not a syntactically valid address, or None if it is."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        return str(e)
    return None


class FormatCheck(Check):
    """Address syntax only; no DNS."""

    coefficient = 0.7

    def validate(self, email: str) -> bool:
        error = syntax_error(email)
        if error is not None:
            if self.logger:
                self.logger.warning(
                    "FormatCheck: invalid email format %s: %s", email, error
                )
            return False
        return True


class DomainCheck(Check):
    coefficient = 0.8

    def validate(self, email: str) -> bool:
        domain = extract_domain(email.strip())
        if not is_valid_domain(domain):
            if self.logger:
                self.logger.warning(
                    "DomainCheck: invalid domain %r in %s", domain, email
                )
            return False
        return True


class MxRecordCheck(Check):
    """The domain must publish at least one MX record."""

    coefficient = 1.0

    def __init__(
        self,
        resolver: Optional[DnsResolver] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(logger)
        self.resolver = resolver if resolver is not None else DnsResolver()

    def validate(self, email: str) -> bool:
        domain = extract_domain(email)
        if domain is None:
            if self.logger:
                self.logger.warning("MxRecordCheck: missing '@' in %s", email)
            return False
        if not is_valid_domain(domain):
            if self.logger:
                self.logger.warning(
                    "MxRecordCheck: invalid domain %r in %s", domain, email
                )
            return False

        try:
            found = self.resolver.has_record(domain, "MX")
        except DnsLookupError as e:
            if self.logger:
                self.logger.error(
                    "MxRecordCheck: DNS error for %s (%s): %s", domain, email, e
                )
            return False

        if not found and self.logger:
            self.logger.info("MxRecordCheck: no MX record for %s (%s)", domain, email)
        return found


class DisposableEmailCheck(Check):
    """Rejects addresses on throwaway domains such as mailinator.com."""

    coefficient = 0.9

    def __init__(
        self,
        domains: Iterable[str] = DEFAULT_DISPOSABLE_DOMAINS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(logger)
        self.domains: FrozenSet[str] = frozenset(
            d.strip().lower() for d in domains if d.strip()
        )

    def validate(self, email: str) -> bool:
        email = email.strip()
        error = syntax_error(email)
        if error is not None:
            if self.logger:
                self.logger.warning(
                    "DisposableEmailCheck: invalid email format %s: %s", email, error
                )
            return False

        domain = extract_domain(email)
        if not is_valid_domain(domain):
            if self.logger:
                self.logger.warning(
                    "DisposableEmailCheck: invalid domain %r in %s", domain, email
                )
            return False

        if domain.lower() in self.domains:
            if self.logger:
                self.logger.info(
                    "DisposableEmailCheck: disposable domain %s (%s)", domain, email
                )
            return False
        return True


def load_disposable_domains(path: Union[str, Path]) -> FrozenSet[str]:
    """One domain per line; blank lines and ``#`` comments are skipped."""
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise ConfigurationError("disposable_file", f"cannot read {path}: {e}")
    return frozenset(
        line.strip().lower()
        for line in lines
        if line.strip() and not line.lstrip().startswith("#")
    )
