"""
Precache manifest injection into a service-worker template.

Follows workbox-build's ``injectManifest``: glob matches are revisioned with
the MD5 of their content, explicit entries are appended, and the single
``self.__WB_MANIFEST`` placeholder in the template is replaced by the JSON
array of entries.
"""

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from pwa_precache.config import INJECTION_POINT, MAXIMUM_FILE_SIZE
from pwa_precache.core.manifest import ManifestEntry
from pwa_precache.errors import InjectionError
from pwa_precache.utils.log import log

# Chunk size for hashing files (512 KiB)
_HASH_CHUNK = 524288


@dataclass
class InjectionResult:
    count: int
    size: int
    warnings: list[str] = field(default_factory=list)


def file_revision(path: Path) -> str:
    """MD5 hex digest of the file at *path*."""
    h = hashlib.md5()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_HASH_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest()


def _expand(glob_directory: Path, pattern: str) -> list[Path]:
    literal = glob_directory / pattern
    if literal.is_file():
        return [literal]
    return sorted(p for p in glob_directory.glob(pattern) if p.is_file())


def build_manifest(
    glob_directory: Path,
    glob_patterns: Iterable[str],
    additional_entries: Iterable[ManifestEntry],
    maximum_file_size: int = MAXIMUM_FILE_SIZE,
) -> tuple[list[dict], int, list[str]]:
    """Return ``(entries, total_size, warnings)`` for the given inputs."""
    entries: list[dict] = []
    seen: set[str] = set()
    warnings: list[str] = []
    size = 0

    for pattern in glob_patterns:
        matches = _expand(glob_directory, pattern)
        if not matches:
            warnings.append(
                f"One of the glob patterns doesn't match any files: {pattern}"
            )
            continue
        for path in matches:
            url = path.relative_to(glob_directory).as_posix()
            if url in seen:
                continue
            file_size = path.stat().st_size
            if file_size > maximum_file_size:
                warnings.append(
                    f"{url} is {file_size} bytes, which is larger than the "
                    f"maximum size of {maximum_file_size} bytes – not precached"
                )
                continue
            seen.add(url)
            size += file_size
            entries.append({"revision": file_revision(path), "url": url})

    for entry in additional_entries:
        if entry.url in seen:
            continue
        seen.add(entry.url)
        entries.append(entry.to_dict())

    return entries, size, warnings


def inject_manifest(
    sw_src: Path,
    sw_dest: Path,
    glob_directory: Path,
    glob_patterns: Iterable[str],
    additional_entries: Iterable[ManifestEntry] = (),
    maximum_file_size: int = MAXIMUM_FILE_SIZE,
) -> InjectionResult:
    """
    Write *sw_dest*: the template *sw_src* with its injection point replaced
    by the precache manifest.

    Raises ``InjectionError`` when the template cannot be read or does not
    contain the injection point exactly once.
    """
    try:
        template = sw_src.read_text(encoding="utf-8")
    except OSError as exc:
        raise InjectionError(f"Unable to read service worker template {sw_src}: {exc}") from exc

    occurrences = template.count(INJECTION_POINT)
    if occurrences == 0:
        raise InjectionError(f"Unable to find a place to inject the manifest in {sw_src}")
    if occurrences > 1:
        raise InjectionError(
            f"Multiple instances of {INJECTION_POINT} were found in {sw_src}"
        )

    entries, size, warnings = build_manifest(
        glob_directory, glob_patterns, additional_entries, maximum_file_size
    )
    manifest_json = json.dumps(entries, separators=(",", ":"), ensure_ascii=False)
    sw_dest.parent.mkdir(parents=True, exist_ok=True)
    sw_dest.write_text(template.replace(INJECTION_POINT, manifest_json), encoding="utf-8")

    for w in warnings:
        log.warning("[SW] %s", w)
    log.info("[SW] Injected %d entries (%d bytes of globbed files) into %s",
             len(entries), size, sw_dest)
    return InjectionResult(count=len(entries), size=size, warnings=warnings)
