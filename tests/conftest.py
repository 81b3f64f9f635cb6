"""
Shared pytest fixtures for the mailgate test suite.

No test touches the network or real DNS: HTTP clients and resolvers are
replaced by the fakes in tests/helpers.py.
"""

from __future__ import annotations

import logging

import pytest

from tests.helpers import FakeClock, RecordingCache


@pytest.fixture
def logger(caplog) -> logging.Logger:
    caplog.set_level(logging.DEBUG, logger="mailgate.test")
    return logging.getLogger("mailgate.test")


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
