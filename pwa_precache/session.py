"""
HTTP session creation for dependency fetching.
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from pwa_precache.config import MAX_RETRIES, RETRY_STATUS_CODES


def build_session(verify_ssl: bool = True) -> requests.Session:
    """Return a ``requests.Session`` with retry logic on 5xx responses
    and keep-alive pre-configured."""
    session = requests.Session()
    retry = Retry(
        total=MAX_RETRIES,
        backoff_factor=0.5,
        status_forcelist=RETRY_STATUS_CODES,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl
    session.headers.update({
        "User-Agent": "pwa-precache/1.0 (+service-worker builder)",
        "Accept": "application/javascript, text/javascript, */*;q=0.8",
        "Connection": "keep-alive",
    })
    return session
