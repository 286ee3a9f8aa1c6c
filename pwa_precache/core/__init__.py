"""Core build logic – dependency crawl, manifest store, injection."""

from pwa_precache.core.builder import PrecacheBuilder
from pwa_precache.core.crawler import CrawlResult, PrecacheCrawler
from pwa_precache.core.injector import InjectionResult, inject_manifest
from pwa_precache.core.manifest import ManifestEntry, ManifestStore
from pwa_precache.core.storage import AppFileSystem, AppFileSystems, FileEvent

__all__ = [
    "PrecacheBuilder",
    "CrawlResult",
    "PrecacheCrawler",
    "InjectionResult",
    "inject_manifest",
    "ManifestEntry",
    "ManifestStore",
    "AppFileSystem",
    "AppFileSystems",
    "FileEvent",
]
