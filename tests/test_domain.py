"""Unit tests for mailgate/domain.py"""

from __future__ import annotations

import pytest

from mailgate.domain import extract_domain, is_valid_domain


class TestIsValidDomain:
    @pytest.mark.parametrize(
        "domain",
        [
            "example.com",
            "sub.example.com",
            "xn--d1acj3b.xn--p1ai",
            "a-b.example.org",
            " example.com ",
        ],
    )
    def test_valid(self, domain):
        assert is_valid_domain(domain) is True

    @pytest.mark.parametrize(
        "domain",
        [
            None,
            "",
            "-example.com",
            "example-.com",
            "example..com",
            "localhost",
            "example.c",
            "example.123",
            "example.xn--",
            "a" * 64 + ".com",
            ("a" * 60 + ".") * 5 + "com",
        ],
    )
    def test_invalid(self, domain):
        assert is_valid_domain(domain) is False

    def test_punycode_tld(self):
        assert is_valid_domain("xn--80ak6aa92e.xn--p1ai") is True
        assert is_valid_domain("example.XN--P1AI") is True


class TestExtractDomain:
    def test_last_at_sign(self):
        assert extract_domain('"a@b"@example.com') == "example.com"

    def test_missing_at_sign(self):
        assert extract_domain("example.com") is None
