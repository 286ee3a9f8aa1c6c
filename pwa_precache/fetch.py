"""
Dependency fetching.

Every request is bounded by a timeout.  Transport errors are logged and
reported as ``None``: the crawl records the reference and moves on.
"""

from dataclasses import dataclass

import requests

from pwa_precache.config import REQUEST_TIMEOUT
from pwa_precache.session import build_session
from pwa_precache.utils.log import log


def is_javascript(content_type: str | None) -> bool:
    """True for any JavaScript media type (``text/javascript``,
    ``application/javascript; charset=utf-8`` …)."""
    return bool(content_type) and "javascript" in content_type.lower()


@dataclass
class FetchResult:
    url: str
    status_code: int
    content_type: str
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_script(self) -> bool:
        return self.ok and is_javascript(self.content_type)


class Fetcher:
    """Thin wrapper over a ``requests`` session used by the crawler."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
        verify_ssl: bool = True,
    ) -> None:
        self.session = session if session is not None else build_session(verify_ssl)
        self.timeout = timeout

    def fetch(self, url: str) -> FetchResult | None:
        """GET *url*; ``None`` on network error or timeout."""
        try:
            resp = self.session.get(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as exc:
            log.warning("[FETCH] Request failed for %s – %s", url, exc)
            return None

        content_type = resp.headers.get("Content-Type", "")
        if not resp.ok:
            log.warning("[FETCH] HTTP %s for %s – not expanding", resp.status_code, url)
            return FetchResult(url, resp.status_code, content_type, "")

        log.debug("  ← HTTP %s  CT: %s  %s", resp.status_code, content_type, url)
        text = resp.text if is_javascript(content_type) else ""
        return FetchResult(url, resp.status_code, content_type, text)

    def close(self) -> None:
        self.session.close()
