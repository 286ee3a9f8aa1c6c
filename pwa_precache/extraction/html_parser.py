"""
CDN reference extraction from HTML via BeautifulSoup.

Only absolute ``https://`` script and stylesheet references are returned:
local files are picked up from the directory listing, so the HTML pass
exists to pull in third-party hosted dependencies.
"""

from bs4 import BeautifulSoup

_CDN_PREFIX = "https://"

# rel values that are hints to the browser, not resources
_SKIPPED_RELS = frozenset({"preconnect"})


def _rel_values(el) -> list[str]:
    rel = el.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [r.lower() for r in rel]


def extract_html_refs(html: str) -> list[str]:
    """Return the ``src`` of ``<script>`` and ``href`` of ``<link>`` elements
    pointing at ``https://`` URLs, in document order."""
    found: list[str] = []
    soup = BeautifulSoup(html, "lxml")
    for el in soup.select("script[src], link[href]"):
        value = el.get("src") if el.name == "script" else el.get("href")
        if not value:
            continue
        value = value.strip()
        if not value.startswith(_CDN_PREFIX):
            continue
        if _SKIPPED_RELS.intersection(_rel_values(el)):
            continue
        found.append(value)
    return found
