"""HTTP client used for reputation provider lookups."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import requests

from .errors import TransportError
from .models import HttpResponse

DEFAULT_TIMEOUT = 5.0


class HttpClient:
    """Thin wrapper over a requests.Session: one attempt per call, no retries."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify: bool = True,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.verify = verify

    def get(
        self, url: str, headers: Optional[Mapping[str, str]] = None
    ) -> HttpResponse:
        """GET *url*; any transport problem or non-2xx status raises TransportError."""
        try:
            r = self.session.get(
                url,
                headers=dict(headers or {}),
                timeout=self.timeout,
                verify=self.verify,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e
        return HttpResponse(r.status_code, r.text)

    def close(self) -> None:
        self.session.close()


def _request_logger(logger: logging.Logger):
    def hook(response: requests.Response, *args, **kwargs) -> None:
        logger.debug(
            "%s %s %s %s",
            response.request.method,
            response.url,
            response.status_code,
            response.headers.get("Content-Length", "-"),
        )

    return hook


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT,
    verify: bool = True,
    logger: Optional[logging.Logger] = None,
    log_requests: bool = False,
) -> HttpClient:
    """Build an HttpClient; with *log_requests* every response is logged at debug."""
    session = requests.Session()
    if log_requests and logger is not None:
        session.hooks["response"].append(_request_logger(logger))
    return HttpClient(session=session, timeout=timeout, verify=verify)
