"""
Reference resolution and URL canonicalisation.

A raw reference found in a script or page is resolved against the task that
discovered it.  Two strings come out of resolution: the *fetch target* used to
retrieve the resource (same-origin requests carry the ``appName`` routing
parameter) and the *canonical* manifest key, which is origin-agnostic and
never carries that parameter.
"""

import os
import posixpath
import urllib.parse
from dataclasses import dataclass
from pathlib import Path

from pwa_precache.config import APP_PARAM
from pwa_precache.models import ContentTask, CrawlTask, FileTask

_FETCHABLE_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one raw reference."""

    url: str                        # canonical manifest key
    fetch_url: str | None = None    # set when the resource must be fetched
    file_path: Path | None = None   # set when the resource is a local file

    @property
    def is_remote(self) -> bool:
        return self.fetch_url is not None


def has_scheme(ref: str) -> bool:
    """True when *ref* starts with a URL scheme (``https:``, ``data:`` …)."""
    return bool(urllib.parse.urlsplit(ref).scheme)


def is_absolute_url(ref: str) -> bool:
    """True for ``http://`` and ``https://`` URLs."""
    return urllib.parse.urlsplit(ref).scheme.lower() in _FETCHABLE_SCHEMES


def origin_of(url: str) -> str:
    """Return ``scheme://authority`` of *url*."""
    p = urllib.parse.urlsplit(url)
    return f"{p.scheme}://{p.netloc}"


def with_app_param(url: str, app_name: str) -> str:
    """Append the ``appName`` routing parameter to *url* (once)."""
    query = urllib.parse.urlsplit(url).query
    if (APP_PARAM, app_name) in urllib.parse.parse_qsl(query, keep_blank_values=True):
        return url
    sep = "&" if query else "?"
    return f"{url}{sep}{APP_PARAM}={urllib.parse.quote(app_name, safe='')}"


def strip_app_param(url: str, app_name: str) -> str:
    """Remove ``appName=<app_name>`` from the query string of *url*."""
    parts = urllib.parse.urlsplit(url)
    if not parts.query:
        return url
    pairs = urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
    kept = [(k, v) for k, v in pairs if not (k == APP_PARAM and v == app_name)]
    if len(kept) == len(pairs):
        return url
    return urllib.parse.urlunsplit(parts._replace(query=urllib.parse.urlencode(kept)))


def canonical_url(url: str, local_base_url: str, app_name: str) -> str:
    """
    Manifest key for *url*: local origin and routing parameter removed.

    Local keys are relative to the application root, the form the directory
    listing produces: ``/js/b.js``, ``js/b.js`` and
    ``http://localhost:3000/js/b.js`` all map to ``js/b.js``.  The root
    itself stays ``/``.
    """
    if local_base_url and url.startswith(local_base_url):
        url = url[len(local_base_url):]
    url = strip_app_param(url, app_name)
    if is_absolute_url(url):
        return url
    path = url.lstrip("/")
    if not path or path.startswith("?"):
        return "/" + path
    return path


def resolve_reference(
    raw: str,
    task: CrawlTask,
    *,
    local_base_url: str,
    app_name: str,
    asset_root: Path,
) -> Resolution | None:
    """
    Resolve *raw*, found while analysing *task*.

    Returns ``None`` for references that name no cacheable resource
    (empty strings, ``data:``/``blob:``/``javascript:`` URLs).
    """
    raw = raw.strip()
    if not raw:
        return None

    if has_scheme(raw):
        if not is_absolute_url(raw):
            return None
        return Resolution(
            url=canonical_url(raw, local_base_url, app_name),
            fetch_url=raw,
        )

    if isinstance(task, ContentTask):
        return _resolve_from_content(raw, task, local_base_url, app_name)
    return _resolve_from_file(raw, task, local_base_url, app_name, asset_root)


def _resolve_from_content(
    raw: str, task: ContentTask, local_base_url: str, app_name: str
) -> Resolution:
    # Fetched text has no directory on disk: everything goes through HTTP.
    if is_absolute_url(task.identity):
        full = urllib.parse.urljoin(task.identity, raw)
    else:
        full = posixpath.normpath(posixpath.join(posixpath.dirname(task.identity), raw))

    fetch_url = full
    if not is_absolute_url(fetch_url):
        fetch_url = f"{local_base_url}/{fetch_url.lstrip('/')}"
    if local_base_url and fetch_url.startswith(local_base_url):
        fetch_url = with_app_param(strip_app_param(fetch_url, app_name), app_name)

    return Resolution(
        url=canonical_url(full, local_base_url, app_name),
        fetch_url=fetch_url,
    )


def _resolve_from_file(
    raw: str, task: FileTask, local_base_url: str, app_name: str, asset_root: Path
) -> Resolution:
    path_part = urllib.parse.urlsplit(raw).path or raw
    if raw.startswith("/"):
        url = posixpath.normpath(raw)
        file_path = asset_root / path_part.lstrip("/")
    else:
        url = posixpath.normpath(posixpath.join(posixpath.dirname(task.identity), raw))
        file_path = task.path.parent / path_part
    return Resolution(
        url=canonical_url(url, local_base_url, app_name),
        file_path=Path(os.path.normpath(file_path)),
    )
