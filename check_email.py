#!/usr/bin/env python3
"""
check_email.py — email address validator

Features
- Syntax validation (email-validator)
- Domain shape and MX/DNS check (dnspython)
- Disposable-domain list
- Concurrent spam-database lookups against any number of JSON providers,
  with cached verdicts
- One report line per address; exit status 1 if any address fails

Environment (.env)
  MAILGATE_PROVIDERS_FILE=providers.json
  MAILGATE_DISPOSABLE_FILE=disposable.txt
  MAILGATE_HTTP_TIMEOUT=5
  MAILGATE_LOG_FILE=logs/mailgate.log

Usage
  python check_email.py EMAIL [EMAIL ...] [--no-mx] [--no-reputation]
  python check_email.py user@example.com --providers providers.json
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Tuple

import click
from dotenv import load_dotenv

from mailgate.builder import build_pipeline
from mailgate.config import Settings, positive_seconds
from mailgate.errors import ConfigurationError
from mailgate.logs import create_logger
from mailgate.report import format_line

# --------------------------
# Output
# --------------------------


def print_report(lines: Tuple[str, ...], valid_count: int) -> None:
    print("\n================ Email Check =================")
    for line in lines:
        icon = "✅" if line.endswith(": valid") else "🚫"
        print(f"{icon} {line}")
    print("============================================")
    print(f"📊 {valid_count}/{len(lines)} address(es) valid\n")


# --------------------------
# CLI
# --------------------------


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("emails", nargs=-1, required=True)
@click.option(
    "--providers",
    "providers_file",
    type=click.Path(dir_okay=False),
    help="JSON file with reputation providers.",
)
@click.option(
    "--disposable",
    "disposable_file",
    type=click.Path(dir_okay=False),
    help="File listing disposable domains, one per line.",
)
@click.option("--no-mx", is_flag=True, help="Skip the MX record lookup.")
@click.option("--no-reputation", is_flag=True, help="Skip spam-database providers.")
@click.option(
    "--log-file", type=click.Path(dir_okay=False), help="Write logs to this file."
)
@click.option("--timeout", type=float, help="Per-provider HTTP timeout in seconds.")
def main(
    emails: Tuple[str, ...],
    providers_file: Optional[str],
    disposable_file: Optional[str],
    no_mx: bool,
    no_reputation: bool,
    log_file: Optional[str],
    timeout: Optional[float],
) -> None:
    load_dotenv()
    try:
        settings = Settings.from_env()
        if providers_file:
            settings.providers_file = providers_file
        if disposable_file:
            settings.disposable_file = disposable_file
        if log_file:
            settings.log_file = log_file
        if timeout is not None:
            settings.http_timeout = positive_seconds("--timeout", timeout)

        logger: Optional[logging.Logger] = None
        if settings.log_file:
            logger = create_logger(settings.log_file, level=settings.log_level)

        pipeline = build_pipeline(
            settings,
            logger=logger,
            check_mx=not no_mx,
            check_reputation=not no_reputation,
        )
    except ConfigurationError as e:
        raise click.UsageError(f"Configuration error: {e}")

    lines = []
    valid_count = 0
    for email in emails:
        verdict = pipeline.run(email)
        valid_count += verdict.valid
        lines.append(format_line(email, verdict))

    print_report(tuple(lines), valid_count)
    sys.exit(0 if valid_count == len(emails) else 1)


if __name__ == "__main__":
    main()
