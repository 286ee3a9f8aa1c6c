"""
Rebuild on change.

Any write or delete under an application's public tree, other than the
generated service worker itself, rebuilds that application's service worker
when the application has the PWA capability enabled.  Rebuilds of one
application are serialized by the builder's per-application lock.
"""

import threading

from pwa_precache.config import SW_FILENAME
from pwa_precache.core.builder import PrecacheBuilder
from pwa_precache.core.storage import FILE_DELETED, FILE_WRITTEN, FileEvent
from pwa_precache.utils.log import log


class RebuildTrigger:
    """Subscribes a ``PrecacheBuilder`` to file-change notifications.

    With ``background=True`` each rebuild runs on its own daemon thread so
    the writer that caused the notification is not held up by the crawl.
    """

    EVENTS = (FILE_WRITTEN, FILE_DELETED)

    def __init__(self, builder: PrecacheBuilder, background: bool = False) -> None:
        self.builder = builder
        self.background = background
        self._attached = False

    def attach(self) -> None:
        if self._attached:
            return
        for event in self.EVENTS:
            self.builder.file_systems.add_listener(event, self.on_change)
        self._attached = True

    def detach(self) -> None:
        for event in self.EVENTS:
            self.builder.file_systems.remove_listener(event, self.on_change)
        self._attached = False

    def should_rebuild(self, event: FileEvent) -> bool:
        # sw.js is the build output itself
        if event.relative_path == SW_FILENAME:
            return False
        return self.builder.registry.has_capability(event.app_name)

    def on_change(self, event: FileEvent) -> None:
        if not self.should_rebuild(event):
            return
        log.info("[WATCH] %s changed in %s – rebuilding service worker",
                 event.relative_path, event.app_name)
        if self.background:
            threading.Thread(
                target=self._rebuild, args=(event.app_name,), daemon=True,
            ).start()
        else:
            self._rebuild(event.app_name)

    def _rebuild(self, app_name: str) -> None:
        try:
            self.builder.build(app_name)
        except Exception:
            log.exception("[ERR] Rebuild of %s failed", app_name)
