"""
Service-worker build: crawl, inject, announce.

Builds for one application never overlap: each takes that application's
lock, so a rebuild requested while one is running waits for it.
"""

import threading
import time

from pwa_precache.config import SW_FILENAME, SW_TEMPLATE_FILENAME, BuildConfig
from pwa_precache.core.crawler import CrawlResult, PrecacheCrawler
from pwa_precache.core.injector import InjectionResult, inject_manifest
from pwa_precache.core.storage import FILE_WRITTEN, AppFileSystems
from pwa_precache.fetch import Fetcher
from pwa_precache.plugins import PluginRegistry
from pwa_precache.utils.log import log


class PrecacheBuilder:
    """Runs full service-worker builds for the applications of a registry."""

    def __init__(
        self,
        config: BuildConfig,
        registry: PluginRegistry,
        file_systems: AppFileSystems | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.file_systems = file_systems if file_systems is not None else AppFileSystems(config)
        self.fetcher = fetcher
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, app_name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(app_name, threading.Lock())

    def crawl(self, app_name: str) -> CrawlResult:
        """Compute the precache manifest of *app_name* without writing it."""
        fetcher = self.fetcher or Fetcher(
            timeout=self.config.request_timeout, verify_ssl=self.config.verify_ssl,
        )
        try:
            crawler = PrecacheCrawler(
                app_name,
                self.registry.context_of_app(app_name),
                self.config,
                file_system=self.file_systems.get_file_system(app_name),
                fetcher=fetcher,
            )
            return crawler.run()
        finally:
            if self.fetcher is None:
                fetcher.close()

    def build(self, app_name: str) -> InjectionResult:
        """Crawl *app_name* and write its ``sw.js``."""
        with self._lock_for(app_name):
            t0 = time.monotonic()
            result = self.crawl(app_name)

            app_fs = self.file_systems.get_file_system(app_name)
            sw_dest = app_fs.path(SW_FILENAME)
            injection = inject_manifest(
                sw_src=app_fs.path(SW_TEMPLATE_FILENAME),
                sw_dest=sw_dest,
                glob_directory=app_fs.root,
                glob_patterns=result.glob_patterns,
                additional_entries=result.entries,
            )
            log.info("[SW] Service worker for app %s generated at %s (%.1f s)",
                     app_name, sw_dest, time.monotonic() - t0)

        app_fs.emit(FILE_WRITTEN, SW_FILENAME)
        return injection
