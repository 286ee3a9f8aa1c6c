"""
Per-application file systems with change notifications.

Writes and deletes made through an ``AppFileSystem`` are announced to the
listeners registered on the owning ``AppFileSystems`` hub; the rebuild
trigger subscribes there.
"""

import fnmatch
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from pwa_precache.config import LISTING_IGNORE, PUBLIC_BRANCH, BuildConfig
from pwa_precache.utils.log import log

FILE_WRITTEN = "file_written"
FILE_DELETED = "file_deleted"


@dataclass(frozen=True)
class FileEvent:
    app_name: str
    relative_path: str
    file_path: Path
    branch: str = PUBLIC_BRANCH


Listener = Callable[[FileEvent], None]


class AppFileSystem:
    """File access rooted at one application's public directory."""

    def __init__(self, app_name: str, root: Path, hub: "AppFileSystems") -> None:
        self.app_name = app_name
        self.root = root
        self._hub = hub

    def path(self, relative: str) -> Path:
        return self.root / relative

    def relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def path_exists(self, relative: str) -> bool:
        return self.path(relative).exists()

    def list_files(self) -> Iterator[Path]:
        """Every file under the root, sorted, minus ignored patterns."""
        if not self.root.is_dir():
            return
        for p in sorted(self.root.rglob("*")):
            if not p.is_file():
                continue
            if any(fnmatch.fnmatch(p.name, pat) for pat in LISTING_IGNORE):
                continue
            yield p

    def read_text(self, relative: str) -> str:
        return self.path(relative).read_text(encoding="utf-8")

    def write_text(self, relative: str, text: str) -> None:
        self.write_bytes(relative, text.encode("utf-8"))

    def write_bytes(self, relative: str, data: bytes) -> None:
        target = self.path(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        log.debug("Saved → %s (%d bytes)", target, len(data))
        self.emit(FILE_WRITTEN, relative)

    def remove(self, relative: str) -> None:
        target = self.path(relative)
        target.unlink()
        log.debug("Removed %s", target)
        self.emit(FILE_DELETED, relative)

    def emit(self, event: str, relative: str) -> None:
        self._hub.emit(event, FileEvent(
            app_name=self.app_name,
            relative_path=relative,
            file_path=self.path(relative),
        ))


class AppFileSystems:
    """Hub handing out ``AppFileSystem`` objects and dispatching events."""

    def __init__(self, config: BuildConfig) -> None:
        self.config = config
        self._listeners: dict[str, list[Listener]] = {}
        self._lock = threading.Lock()

    def get_file_system(self, app_name: str) -> AppFileSystem:
        return AppFileSystem(app_name, self.config.public_dir(app_name), self)

    def add_listener(self, event: str, callback: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(event, []).append(callback)

    def remove_listener(self, event: str, callback: Listener) -> None:
        with self._lock:
            callbacks = self._listeners.get(event, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def emit(self, event: str, payload: FileEvent) -> None:
        with self._lock:
            callbacks = list(self._listeners.get(event, []))
        for cb in callbacks:
            cb(payload)
