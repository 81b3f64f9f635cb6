"""Shared data models for checks, verdicts and provider outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class CheckResult:
    check: str  # diagnostic label of the failing check
    severity: float  # 0..1, 1.0 is critical


@dataclass(frozen=True)
class Verdict:
    valid: bool
    failures: Tuple[CheckResult, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: str


# --------------------------
# Provider outcomes
# --------------------------


@dataclass(frozen=True)
class CachedHit:
    flagged: bool


@dataclass(frozen=True)
class Fulfilled:
    flagged: bool


@dataclass(frozen=True)
class Failed:
    error: BaseException


ProviderOutcome = Union[CachedHit, Fulfilled, Failed]
