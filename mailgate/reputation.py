"""
Reputation check against external spam databases.

Each configured provider is queried concurrently for one address. Verdicts
are cached per (provider, address) with the provider's TTL. Aggregation:

- any provider reporting the address as spam flags it,
- if every provider failed, the address is not flagged (fail-open),
- a failed provider never counts as evidence either way.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote_plus

from .cache import CacheItem, VerdictCache, cache_key
from .checks import Check
from .config import DEFAULT_TTL_SECONDS, ReputationProviderConfig
from .errors import MalformedResponseError, TransportError
from .http import HttpClient
from .models import CachedHit, Failed, Fulfilled, ProviderOutcome

MAX_WORKERS = 8


def build_url(config: ReputationProviderConfig, email: str) -> str:
    """Substitute the percent-encoded address into the endpoint template."""
    return config.endpoint_template.replace("{email}", quote_plus(email))


def resolve_field(data: Any, path: Sequence[str]) -> bool:
    """Walk *path* through nested dicts/lists; a missing step means not flagged."""
    value = data
    for key in path:
        if isinstance(value, dict):
            value = value.get(key)
        elif isinstance(value, list) and key.isdigit() and int(key) < len(value):
            value = value[int(key)]
        else:
            return False
        if value is None:
            return False
    return bool(value)


class ReputationQuery:
    """One provider lookup: cache read, HTTP GET, parse, cache write."""

    def __init__(
        self,
        http_client: HttpClient,
        cache: VerdictCache,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.http_client = http_client
        self.cache = cache
        self.logger = logger

    def execute(
        self, config: ReputationProviderConfig, email: str
    ) -> ProviderOutcome:
        key = cache_key(config.endpoint_template, email)
        item = self._read_cache(key, email)
        if item is not None and item.is_hit:
            if self.logger:
                self.logger.info("Reputation cache hit for %s (key %s)", email, key)
            return CachedHit(bool(item.value))

        url = build_url(config, email)
        try:
            response = self.http_client.get(url, config.header_map())
            flagged = self.parse_response(response.body, config)
        except (TransportError, MalformedResponseError) as e:
            return Failed(e)

        if item is not None:
            self._write_cache(item, flagged, config.ttl_seconds, email)
        return Fulfilled(flagged)

    def parse_response(self, body: str, config: ReputationProviderConfig) -> bool:
        try:
            data = json.loads(body)
        except ValueError as e:
            if self.logger:
                self.logger.warning(
                    "Invalid JSON from %s: %.200r", config.endpoint_template, body
                )
            raise MalformedResponseError(f"{config.endpoint_template}: {e}") from e
        return resolve_field(data, config.response_field_path)

    def _read_cache(self, key: str, email: str) -> Optional[CacheItem]:
        try:
            return self.cache.get_item(key)
        except Exception as e:
            if self.logger:
                self.logger.error("Reputation cache read failed for %s: %s", email, e)
            return None

    def _write_cache(
        self, item: CacheItem, flagged: bool, ttl: int, email: str
    ) -> None:
        item.set(flagged).expires_after(ttl or DEFAULT_TTL_SECONDS)
        try:
            self.cache.save(item)
        except Exception as e:
            if self.logger:
                self.logger.error("Reputation cache write failed for %s: %s", email, e)


class ReputationOrchestrator:
    """Fan out one ReputationQuery per provider and join them all before deciding."""

    def __init__(
        self,
        providers: Iterable[ReputationProviderConfig],
        query: ReputationQuery,
        logger: Optional[logging.Logger] = None,
        max_workers: int = MAX_WORKERS,
    ) -> None:
        self.providers: Tuple[ReputationProviderConfig, ...] = tuple(providers)
        self.query = query
        self.logger = logger
        self.max_workers = max_workers

    def collect(
        self, email: str
    ) -> List[Tuple[ReputationProviderConfig, ProviderOutcome]]:
        """Run every provider query; results keep registration order."""
        if not self.providers:
            return []

        workers = max(1, min(len(self.providers), self.max_workers))
        results: List[Tuple[ReputationProviderConfig, ProviderOutcome]] = []
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="reputation"
        ) as executor:
            futures = [
                executor.submit(self.query.execute, p, email) for p in self.providers
            ]
            for provider, future in zip(self.providers, futures):
                try:
                    outcome = future.result()
                except Exception as e:
                    outcome = Failed(e)
                results.append((provider, outcome))
        return results

    def is_flagged(self, email: str) -> bool:
        results = self.collect(email)
        if not results:
            if self.logger:
                self.logger.debug(
                    "No reputation providers configured; %s not flagged", email
                )
            return False

        if self.logger:
            self.logger.debug(
                "Reputation outcomes for %s: %s", email, [o for _, o in results]
            )

        for provider, outcome in results:
            if isinstance(outcome, Failed) and self.logger:
                self.logger.warning(
                    "Reputation provider %s failed for %s: %s",
                    provider.endpoint_template, email, outcome.error,
                )

        if all(isinstance(o, Failed) for _, o in results):
            if self.logger:
                self.logger.error(
                    "All reputation providers failed for %s; treating as not flagged",
                    email,
                )
            return False

        for provider, outcome in results:
            if not isinstance(outcome, Failed) and outcome.flagged:
                if self.logger:
                    self.logger.info(
                        "%s flagged as spam by %s", email, provider.endpoint_template
                    )
                return True
        return False


class SpamDatabaseCheck(Check):
    """Fails when any reputation provider flags the address."""

    coefficient = 1.0

    def __init__(
        self,
        orchestrator: ReputationOrchestrator,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(logger)
        self.orchestrator = orchestrator

    @classmethod
    def from_providers(
        cls,
        providers: Iterable[ReputationProviderConfig],
        http_client: HttpClient,
        cache: VerdictCache,
        logger: Optional[logging.Logger] = None,
    ) -> "SpamDatabaseCheck":
        query = ReputationQuery(http_client, cache, logger)
        return cls(ReputationOrchestrator(providers, query, logger), logger)

    def validate(self, email: str) -> bool:
        return not self.orchestrator.is_flagged(email)
