"""
Unit tests for mailgate/builder.py

Collaborators are faked so the assembled pipeline can run offline.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

from mailgate.builder import build_pipeline
from mailgate.cache import InMemoryVerdictCache
from mailgate.checks import MxRecordCheck
from mailgate.config import ProviderConfigSet, ReputationProviderConfig, Settings
from mailgate.reputation import SpamDatabaseCheck
from mailgate.resolver import DnsResolver
from tests.helpers import FakeHttpClient, RecordingCache

PROVIDER = "https://a.example/check"


def _resolver(result: bool = True) -> MagicMock:
    resolver = MagicMock(spec=DnsResolver)
    resolver.has_record.return_value = result
    return resolver


def _providers() -> ProviderConfigSet:
    return ProviderConfigSet(
        [ReputationProviderConfig(PROVIDER + "?email={email}", "email.appears")]
    )


class TestBuildPipeline:
    def test_check_order(self):
        pipeline = build_pipeline(
            Settings(),
            providers=_providers(),
            http_client=FakeHttpClient({}),
            resolver=_resolver(),
        )

        assert [c.label for c in pipeline.checks] == [
            "FormatCheck",
            "DomainCheck",
            "MxRecordCheck",
            "DisposableEmailCheck",
            "SpamDatabaseCheck",
        ]

    def test_optional_checks_can_be_skipped(self):
        pipeline = build_pipeline(Settings(), check_mx=False, check_reputation=False)

        assert [c.label for c in pipeline.checks] == [
            "FormatCheck",
            "DomainCheck",
            "DisposableEmailCheck",
        ]

    def test_logger_is_passed_to_every_check(self):
        logger = MagicMock()
        pipeline = build_pipeline(
            Settings(),
            logger=logger,
            providers=_providers(),
            http_client=FakeHttpClient({}),
            resolver=_resolver(),
        )

        assert pipeline.logger is logger
        assert all(check.logger is logger for check in pipeline.checks)

    def test_injected_collaborators_are_used_even_when_empty(self):
        # A fresh cache has len() == 0 and so is falsy; it must still be used.
        cache = RecordingCache()
        client = FakeHttpClient({})
        resolver = _resolver()
        assert not cache

        pipeline = build_pipeline(
            Settings(),
            providers=_providers(),
            cache=cache,
            http_client=client,
            resolver=resolver,
        )

        mx_check = pipeline.checks[2]
        spam_check = pipeline.checks[-1]
        assert isinstance(mx_check, MxRecordCheck)
        assert mx_check.resolver is resolver
        assert isinstance(spam_check, SpamDatabaseCheck)
        assert spam_check.orchestrator.query.cache is cache
        assert spam_check.orchestrator.query.http_client is client

    def test_default_cache_when_none_given(self):
        pipeline = build_pipeline(
            Settings(),
            providers=_providers(),
            http_client=FakeHttpClient({}),
            resolver=_resolver(),
        )

        spam_check = pipeline.checks[-1]
        assert isinstance(spam_check.orchestrator.query.cache, InMemoryVerdictCache)

    def test_end_to_end_spam_address(self):
        cache = RecordingCache()
        client = FakeHttpClient({PROVIDER: {"email": {"appears": True}}})
        pipeline = build_pipeline(
            Settings(),
            providers=_providers(),
            cache=cache,
            http_client=client,
            resolver=_resolver(),
        )

        verdict = pipeline.run("spam@example.com")

        assert verdict.valid is False
        assert [(f.check, f.severity) for f in verdict.failures] == [
            ("SpamDatabaseCheck", 1.0)
        ]
        assert len(cache.saved) == 1
        assert cache.get_item(cache.saved[0].key).value is True

    def test_end_to_end_clean_address(self):
        client = FakeHttpClient({PROVIDER: {"email": {"appears": False}}})
        pipeline = build_pipeline(
            Settings(), providers=_providers(), http_client=client, resolver=_resolver()
        )

        assert pipeline.validate("user@example.com") is True

    def test_reads_files_from_settings(self, tmp_path):
        providers_file = tmp_path / "providers.json"
        providers_file.write_text(
            json.dumps([{"url": PROVIDER + "?e={email}", "path": "spam"}])
        )
        disposable_file = tmp_path / "disposable.txt"
        disposable_file.write_text("throwaway-mail.net\n")
        settings = Settings(
            providers_file=str(providers_file), disposable_file=str(disposable_file)
        )

        pipeline = build_pipeline(
            settings, http_client=FakeHttpClient({}), resolver=_resolver()
        )

        spam_check = pipeline.checks[-1]
        assert isinstance(spam_check, SpamDatabaseCheck)
        assert len(spam_check.orchestrator.providers) == 1
        assert pipeline.validate("user@throwaway-mail.net") is False
        assert [f.check for f in pipeline.get_diagnostics()] == ["DisposableEmailCheck"]
