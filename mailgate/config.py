"""Provider configuration and environment settings."""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)
from urllib.parse import urlparse

from .errors import ConfigurationError

DEFAULT_TTL_SECONDS = 3600

HeaderInput = Union[Mapping[str, str], Iterable[Tuple[str, str]]]

# Characters that would let a header value start a new header line.
_FORBIDDEN_HEADER_CHARS = ("\r", "\n", "\x00")


def _header_pairs(headers: Optional[HeaderInput]) -> Tuple[Tuple[str, str], ...]:
    """Normalize headers to ordered pairs; names must be unique ignoring case."""
    if headers is None:
        return ()
    items = headers.items() if isinstance(headers, Mapping) else headers
    pairs: List[Tuple[str, str]] = []
    seen = set()
    for item in items:
        try:
            name, value = item
        except (TypeError, ValueError):
            raise ConfigurationError(
                "headers", f"expected a (name, value) pair, got {item!r}"
            )
        if not isinstance(name, str) or not isinstance(value, str):
            raise ConfigurationError(
                "headers", "header names and values must be strings"
            )
        if not name.strip():
            raise ConfigurationError("headers", "header name must not be empty")
        if any(c in name or c in value for c in _FORBIDDEN_HEADER_CHARS):
            raise ConfigurationError(
                "headers", f"header {name!r} contains a line break or NUL"
            )
        if name.lower() in seen:
            raise ConfigurationError("headers", f"duplicate header {name!r}")
        seen.add(name.lower())
        pairs.append((name, value))
    return tuple(pairs)


def _field_path(path: Union[str, Iterable[str]]) -> Tuple[str, ...]:
    """Split ``"email.appears"`` into keys; empty segments are rejected."""
    keys = tuple(path.split(".")) if isinstance(path, str) else tuple(path)
    if not keys or any(not isinstance(k, str) or not k.strip() for k in keys):
        raise ConfigurationError(
            "response_field_path", f"invalid field path {path!r}"
        )
    return keys


@dataclass(frozen=True, init=False)
class ReputationProviderConfig:
    """One external reputation source.

    ``endpoint_template`` is an absolute http(s) URL; an ``{email}`` placeholder
    is substituted with the percent-encoded address at query time. Templates
    without the placeholder are accepted; every address then hits the same URL.
    """

    endpoint_template: str
    response_field_path: Tuple[str, ...]
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    headers: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def __init__(
        self,
        endpoint_template: str,
        response_field_path: Union[str, Iterable[str]],
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        headers: Optional[HeaderInput] = None,
    ) -> None:
        _validate_url(endpoint_template)
        if (
            isinstance(ttl_seconds, bool)
            or not isinstance(ttl_seconds, int)
            or ttl_seconds <= 0
        ):
            raise ConfigurationError(
                "ttl_seconds", f"must be a positive integer, got {ttl_seconds!r}"
            )
        object.__setattr__(self, "endpoint_template", endpoint_template)
        object.__setattr__(
            self, "response_field_path", _field_path(response_field_path)
        )
        object.__setattr__(self, "ttl_seconds", ttl_seconds)
        object.__setattr__(self, "headers", _header_pairs(headers))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReputationProviderConfig":
        """Build from the provider file shape ``{url, path, ttl, headers}``."""
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                "provider", f"expected an object, got {type(data).__name__}"
            )
        for key in ("url", "path"):
            if key not in data:
                raise ConfigurationError(key, "missing")
        return cls(
            endpoint_template=data["url"],
            response_field_path=data["path"],
            ttl_seconds=data.get("ttl", DEFAULT_TTL_SECONDS),
            headers=data.get("headers"),
        )

    def header_map(self) -> Dict[str, str]:
        """Headers as a dict, ready for the HTTP client."""
        return dict(self.headers)

    def to_json(self) -> str:
        return json.dumps(
            {
                "url": self.endpoint_template,
                "path": ".".join(self.response_field_path),
                "ttl": self.ttl_seconds,
                "headers": self.header_map(),
            },
            indent=4,
        )

    def __str__(self) -> str:
        return self.to_json()


def _validate_url(url: Any) -> None:
    """Absolute http(s) URL with a host and no whitespace."""
    if not isinstance(url, str) or not url:
        raise ConfigurationError("endpoint_template", f"invalid URL {url!r}")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(
            "endpoint_template", f"URL must start with http:// or https://: {url}"
        )
    if not parsed.netloc or any(c.isspace() for c in url):
        raise ConfigurationError("endpoint_template", f"invalid URL {url}")


class ProviderConfigSet:
    """Ordered set of provider configs; iteration follows registration order."""

    def __init__(self, providers: Iterable[ReputationProviderConfig] = ()) -> None:
        self._providers: List[ReputationProviderConfig] = []
        for provider in providers:
            self.add(provider)

    def add(self, provider: ReputationProviderConfig) -> None:
        if not isinstance(provider, ReputationProviderConfig):
            raise ConfigurationError(
                "provider",
                f"expected ReputationProviderConfig, got {type(provider).__name__}",
            )
        self._providers.append(provider)

    def __iter__(self) -> Iterator[ReputationProviderConfig]:
        return iter(list(self._providers))

    def __len__(self) -> int:
        return len(self._providers)


def load_providers(path: Union[str, Path]) -> ProviderConfigSet:
    """Read an ordered provider list from a JSON file."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError("providers_file", f"cannot read {path}: {e}")
    except ValueError as e:
        raise ConfigurationError("providers_file", f"{path} is not valid JSON: {e}")

    if not isinstance(raw, list):
        raise ConfigurationError(
            "providers_file", f"{path} must contain a JSON list"
        )

    providers = ProviderConfigSet()
    for index, entry in enumerate(raw):
        try:
            providers.add(ReputationProviderConfig.from_dict(entry))
        except ConfigurationError as e:
            raise ConfigurationError(f"providers[{index}].{e.field}", e.message)
    return providers


# --------------------------
# Environment settings
# --------------------------


def positive_seconds(name: str, value: Any) -> float:
    """Parse a duration; must be a finite number greater than zero."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(name, f"expected a number, got {value!r}")
    if not math.isfinite(parsed) or parsed <= 0:
        raise ConfigurationError(name, f"must be a positive number, got {value!r}")
    return parsed


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return positive_seconds(name, value)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(name, f"expected a boolean, got {value!r}")


@dataclass
class Settings:
    providers_file: Optional[str] = None
    disposable_file: Optional[str] = None
    http_timeout: float = 5.0
    http_verify: bool = True
    http_log: bool = False
    dns_timeout: float = 5.0
    log_file: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read MAILGATE_* variables; call load_dotenv() first to pick up .env."""
        return cls(
            providers_file=os.getenv("MAILGATE_PROVIDERS_FILE") or None,
            disposable_file=os.getenv("MAILGATE_DISPOSABLE_FILE") or None,
            http_timeout=_env_float("MAILGATE_HTTP_TIMEOUT", 5.0),
            http_verify=_env_bool("MAILGATE_HTTP_VERIFY", True),
            http_log=_env_bool("MAILGATE_HTTP_LOG", False),
            dns_timeout=_env_float("MAILGATE_DNS_TIMEOUT", 5.0),
            log_file=os.getenv("MAILGATE_LOG_FILE") or None,
            log_level=(os.getenv("MAILGATE_LOG_LEVEL") or "INFO").upper(),
        )

    def providers(self) -> ProviderConfigSet:
        """Providers from ``providers_file``; empty when none is configured."""
        if not self.providers_file:
            return ProviderConfigSet()
        return load_providers(self.providers_file)
