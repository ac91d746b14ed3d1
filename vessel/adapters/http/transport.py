"""
HTTP transport adapter: blocking GET requests through urllib.

Non-2xx responses are returned with their status and body so callers
can include the server's explanation in their error. Connection
failures come back as ``status=0`` with ``error`` set.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from collections.abc import Mapping

from vessel.adapters.base import HttpResponse, Transport

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "vessel"


class UrllibTransport(Transport):
    """Transport backed by ``urllib.request``."""

    def __init__(self, timeout: float = 60, user_agent: str = DEFAULT_USER_AGENT):
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return "http"

    def is_available(self) -> bool:
        return True

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        request_headers = {"User-Agent": self._user_agent}
        request_headers.update(headers or {})
        req = urllib.request.Request(url, headers=request_headers)

        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                return HttpResponse(
                    url=url,
                    status=resp.status or 200,
                    body=resp.read(),
                    headers=dict(resp.headers.items()),
                )
        except urllib.error.HTTPError as e:
            return HttpResponse(
                url=url,
                status=e.code,
                body=e.read() or b"",
                headers=dict(e.headers.items()) if e.headers else {},
                error=str(e.reason),
            )
        except (urllib.error.URLError, OSError, ValueError) as e:
            reason = getattr(e, "reason", e)
            logger.debug("GET %s failed: %s", url, reason)
            return HttpResponse(url=url, status=0, error=str(reason))
