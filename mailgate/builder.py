"""Assemble a ready-to-use pipeline from Settings."""

from __future__ import annotations

import logging
from typing import Optional

from .cache import InMemoryVerdictCache, VerdictCache
from .checks import (
    DEFAULT_DISPOSABLE_DOMAINS,
    DisposableEmailCheck,
    DomainCheck,
    FormatCheck,
    MxRecordCheck,
    load_disposable_domains,
)
from .config import ProviderConfigSet, Settings
from .http import HttpClient, create_http_client
from .pipeline import CheckPipeline
from .reputation import SpamDatabaseCheck
from .resolver import DnsResolver


def build_pipeline(
    settings: Settings,
    logger: Optional[logging.Logger] = None,
    providers: Optional[ProviderConfigSet] = None,
    cache: Optional[VerdictCache] = None,
    http_client: Optional[HttpClient] = None,
    resolver: Optional[DnsResolver] = None,
    check_mx: bool = True,
    check_reputation: bool = True,
) -> CheckPipeline:
    """Build every check once with its collaborators, then register them in order.

    Order: format, domain, MX, disposable, reputation.
    """
    if providers is None:
        providers = settings.providers()
    domains = (
        load_disposable_domains(settings.disposable_file)
        if settings.disposable_file
        else DEFAULT_DISPOSABLE_DOMAINS
    )

    if resolver is None:
        resolver = DnsResolver(settings.dns_timeout)
    if cache is None:
        cache = InMemoryVerdictCache()

    pipeline = CheckPipeline(logger=logger)
    pipeline.add_check(FormatCheck(logger))
    pipeline.add_check(DomainCheck(logger))
    if check_mx:
        pipeline.add_check(MxRecordCheck(resolver, logger))
    pipeline.add_check(DisposableEmailCheck(domains, logger))
    if check_reputation:
        if http_client is None:
            http_client = create_http_client(
                timeout=settings.http_timeout,
                verify=settings.http_verify,
                logger=logger,
                log_requests=settings.http_log,
            )
        pipeline.add_check(
            SpamDatabaseCheck.from_providers(providers, http_client, cache, logger)
        )
    return pipeline
