"""Plain-text validation report."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Union

from .models import Verdict

if TYPE_CHECKING:
    from .pipeline import CheckPipeline


def format_line(email: str, verdict: Verdict) -> str:
    if verdict.valid:
        return f"{email}: valid"
    failures = ", ".join(f"{f.check} {f.severity:.1f}" for f in verdict.failures)
    return f"{email}: invalid ({failures})"


def format_summary(pipeline: "CheckPipeline", emails: Union[str, Iterable[str]]) -> str:
    """Validate each address in order and render one line per address."""
    if isinstance(emails, str):
        emails = [emails]
    lines: List[str] = [format_line(email, pipeline.run(email)) for email in emails]
    return "\n".join(lines)
