"""
pwa_precache
============
Computes the complete set of static assets a web application needs offline
and injects the resulting precache manifest into its service worker.

Package structure
-----------------
pwa_precache/
├── __init__.py       – package init and public API
├── config.py         – configuration constants and BuildConfig
├── errors.py         – exceptions carrying HTTP status codes
├── models.py         – worklist task types
├── session.py        – requests.Session factory
├── fetch.py          – Fetcher: timed, content-type aware retrieval
├── plugins.py        – per-application plugin registry
├── scaffold.py       – default manifest / template bootstrap
├── triggers.py       – rebuild on file change
├── server.py         – saveManifest / build HTTP endpoints
├── cli.py            – argparse CLI (``python -m pwa_precache``)
├── core/             – crawler, manifest store, injector, builder, storage
├── extraction/       – ES module import and HTML CDN reference extraction
└── utils/            – reference resolution and logging

Quick start
-----------
    from pathlib import Path
    from pwa_precache import BuildConfig, PluginRegistry, AppContext, PrecacheBuilder

    registry = PluginRegistry()
    registry.register_app(AppContext(app_name="demo"))
    builder = PrecacheBuilder(BuildConfig(data_dir=Path("/srv/data")), registry)
    builder.build("demo")
"""

from .config import BuildConfig
from .core import PrecacheBuilder, PrecacheCrawler, inject_manifest
from .extraction import extract_html_refs, extract_js_imports
from .plugins import AppContext, PluginInfo, PluginRegistry
from .utils import resolve_reference

__all__ = [
    "BuildConfig",
    "PrecacheBuilder",
    "PrecacheCrawler",
    "inject_manifest",
    "extract_html_refs",
    "extract_js_imports",
    "AppContext",
    "PluginInfo",
    "PluginRegistry",
    "resolve_reference",
]
