"""
Manifest entry accumulation.

Two lists come out of a crawl: glob patterns (files under the asset root the
injector revisions by content hash) and explicit entries revisioned with a
timestamp token at discovery.  A URL lands in at most one of them, once.
"""

import time
from dataclasses import dataclass
from typing import Callable

from pwa_precache.utils.url import canonical_url


def timestamp_revision(clock: Callable[[], float] = time.time) -> str:
    """Wall-clock milliseconds as a revision token."""
    return str(int(clock() * 1000))


@dataclass(frozen=True)
class ManifestEntry:
    url: str
    revision: str | None

    def to_dict(self) -> dict:
        return {"revision": self.revision, "url": self.url}


class ManifestStore:
    """Deduplicated manifest entries plus the glob-pattern list."""

    def __init__(
        self,
        app_name: str,
        local_base_url: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.app_name = app_name
        self.local_base_url = local_base_url
        self._clock = clock
        self._entries: list[ManifestEntry] = []
        self._entry_urls: set[str] = set()
        self._globs: list[str] = []
        self._glob_set: set[str] = set()

    # ------------------------------------------------------------------

    def canonical(self, url: str) -> str:
        return canonical_url(url, self.local_base_url, self.app_name)

    def __contains__(self, url: str) -> bool:
        url = self.canonical(url)
        return url in self._entry_urls or url in self._glob_set

    def __len__(self) -> int:
        return len(self._entries) + len(self._globs)

    @property
    def entries(self) -> list[ManifestEntry]:
        return list(self._entries)

    @property
    def glob_patterns(self) -> list[str]:
        return list(self._globs)

    # ------------------------------------------------------------------

    def add_glob(self, path: str) -> bool:
        """Register *path* (relative to the asset root) for content hashing."""
        if path in self._glob_set:
            return False
        if path in self._entry_urls:
            # content hash beats a timestamp
            self._entries = [e for e in self._entries if e.url != path]
            self._entry_urls.discard(path)
        self._globs.append(path)
        self._glob_set.add(path)
        return True

    def add_fixed(self, url: str) -> ManifestEntry:
        """Record *url* verbatim with a fresh revision (no canonicalisation)."""
        entry = ManifestEntry(url, timestamp_revision(self._clock))
        if url not in self._entry_urls:
            self._entries.append(entry)
            self._entry_urls.add(url)
        return entry

    def add(self, url: str) -> bool:
        """Record the canonical form of *url* unless it is already an entry
        or a glob pattern.  Returns True when a new entry was added."""
        url = self.canonical(url)
        if url in self._glob_set or url in self._entry_urls:
            return False
        self._entries.append(ManifestEntry(url, timestamp_revision(self._clock)))
        self._entry_urls.add(url)
        return True
