"""Runs every registered check against one address and keeps the diagnostics."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple, Union

from .checks import Check
from .models import CheckResult, Verdict
from .report import format_summary


class CheckPipeline:
    """Ordered set of checks.

    ``validate`` never short-circuits: every check runs in registration order
    and each failure is recorded. Diagnostics are reset at the start of each
    call and describe only the most recent address.
    """

    def __init__(
        self,
        checks: Iterable[Check] = (),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger
        self._checks: List[Check] = []
        self._failures: Tuple[CheckResult, ...] = ()
        for check in checks:
            self.add_check(check)

    def add_check(self, check: Check) -> None:
        if not isinstance(check, Check):
            raise TypeError(f"expected a Check, got {type(check).__name__}")
        self._checks.append(check)

    @property
    def checks(self) -> Tuple[Check, ...]:
        return tuple(self._checks)

    def run(self, email: str) -> Verdict:
        self._failures = ()
        failures: List[CheckResult] = []

        for check in self._checks:
            if not check.validate(email):
                failures.append(CheckResult(check.label, check.error_coefficient()))
                if self.logger:
                    self.logger.warning(
                        "Validation failed: %s for %s", check.label, email
                    )

        self._failures = tuple(failures)
        if not failures and self.logger:
            self.logger.info("E-mail is valid: %s", email)
        return Verdict(valid=not failures, failures=self._failures)

    def validate(self, email: str) -> bool:
        return self.run(email).valid

    def get_diagnostics(self) -> Tuple[CheckResult, ...]:
        return self._failures

    def error_message(self) -> str:
        if not self._failures:
            return "E-mail is valid."
        labels = ", ".join(f.check for f in self._failures)
        return "E-mail is invalid. Errors: " + labels

    def get_summary(self, emails: Union[str, Iterable[str]]) -> str:
        return format_summary(self, emails)
