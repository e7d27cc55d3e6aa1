"""HTTP fetcher for remote cover images (small, dependency-free).

One GET per call: no retries, no timeout override, and redirects are
followed the way urllib does by default. Failures come back as FetchError
values instead of exceptions. Only http and https URLs are fetched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlsplit
from urllib.request import Request, urlopen

from . import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"coversort/{__version__}"

# file: and data: responses carry no HTTP status
SUPPORTED_SCHEMES = {"http", "https"}


@dataclass(frozen=True)
class FetchedResource:
    data: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class FetchError:
    url: str
    status: int | None = None  # HTTP status, when the server answered
    reason: str = ""

    def describe(self) -> str:
        if self.status is not None:
            return f"HTTP {self.status} {self.reason}".strip()
        return self.reason or "fetch failed"


class Fetcher(Protocol):
    def fetch(self, url: str) -> FetchedResource | FetchError: ...


class HttpFetcher:
    """Fetch binary resources over HTTP(S) with urllib."""

    def __init__(self, user_agent: str = USER_AGENT) -> None:
        self._headers = {"User-Agent": user_agent, "Accept": "image/*,*/*;q=0.8"}

    def fetch(self, url: str) -> FetchedResource | FetchError:
        try:
            scheme = urlsplit(url.strip()).scheme.lower()
            if scheme not in SUPPORTED_SCHEMES:
                return FetchError(url=url, reason=f"unsupported URL scheme: {scheme or '(none)'}")
            req = Request(url, method="GET", headers=self._headers)
            with urlopen(req) as resp:
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    return FetchError(url=url, status=status, reason=str(getattr(resp, "reason", "")))
                content_type = resp.headers.get("Content-Type")
                data = resp.read()
        except HTTPError as e:
            logger.debug("GET %s -> HTTP %s", url, e.code)
            return FetchError(url=url, status=e.code, reason=str(e.reason))
        except URLError as e:
            return FetchError(url=url, reason=f"connection error: {e.reason}")
        except Exception as e:  # malformed URLs raise ValueError, sockets raise OSError
            return FetchError(url=url, reason=f"{type(e).__name__}: {e}")

        return FetchedResource(data=data, content_type=content_type)
