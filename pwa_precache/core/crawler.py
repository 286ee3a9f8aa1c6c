"""
Breadth-first dependency crawler for one application's precache manifest.

Seeds the worklist from the application's entry points, then drains it one
task at a time:

* fetched script text is scanned for ES module imports;
* local ``.html`` files are scanned for CDN ``<script>``/``<link>`` URLs;
* local ``.js``/``.mjs`` files are scanned for ES module imports.

Every reference found is resolved and recorded in the manifest, whether or
not it can be expanded further (unreachable or non-script dependencies are
still listed).  A reference already known is never fetched or queued twice,
so the crawl reaches a fixed point over a finite asset tree.
"""

from collections import deque
from dataclasses import dataclass, field

from pwa_precache.config import (
    ADMIN_SCRIPT_PATH,
    ANALYZED_EXTENSIONS,
    INDEX_FILENAME,
    SW_FILENAME,
    BuildConfig,
)
from pwa_precache.core.manifest import ManifestEntry, ManifestStore
from pwa_precache.core.storage import AppFileSystem, AppFileSystems
from pwa_precache.extraction.html_parser import extract_html_refs
from pwa_precache.extraction.javascript import extract_js_imports
from pwa_precache.fetch import Fetcher, FetchResult
from pwa_precache.models import ContentTask, CrawlTask, FileTask
from pwa_precache.plugins import AppContext
from pwa_precache.utils.log import log
from pwa_precache.utils.url import (
    Resolution,
    is_absolute_url,
    resolve_reference,
    strip_app_param,
    with_app_param,
)


@dataclass
class CrawlResult:
    glob_patterns: list[str]
    entries: list[ManifestEntry]
    stats: dict[str, int] = field(default_factory=dict)

    @property
    def urls(self) -> set[str]:
        return set(self.glob_patterns) | {e.url for e in self.entries}


class PrecacheCrawler:
    """
    Computes ``(glob patterns, manifest entries)`` for one application.
    A crawler instance performs a single run.
    """

    def __init__(
        self,
        app_name: str,
        context: AppContext,
        config: BuildConfig,
        file_system: AppFileSystem | None = None,
        fetcher: Fetcher | None = None,
        store: ManifestStore | None = None,
    ) -> None:
        self.app_name = app_name
        self.context = context
        self.config = config
        self.file_system = file_system if file_system is not None else (
            AppFileSystems(config).get_file_system(app_name)
        )
        self.asset_root = self.file_system.root
        self.fetcher = fetcher if fetcher is not None else Fetcher(
            timeout=config.request_timeout, verify_ssl=config.verify_ssl,
        )
        self.store = store if store is not None else ManifestStore(
            app_name, config.local_base_url,
        )

        self._queue: deque[CrawlTask] = deque()
        self._known: set[str] = set()      # canonical keys fetched or queued
        self._stats = {"tasks": 0, "refs": 0, "fetched": 0,
                       "fetch_err": 0, "read_err": 0}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> CrawlResult:
        log.info("Asset root       : %s", self.asset_root)
        log.info("Application      : %s", self.app_name)

        self._seed()
        log.info("Crawl started with %d task(s) queued.", len(self._queue))

        while self._queue:
            task = self._queue.popleft()
            self._process(task)

        log.info(
            "Crawl complete. tasks=%d  refs=%d  fetched=%d  fetch_err=%d  "
            "globs=%d  entries=%d",
            self._stats["tasks"],
            self._stats["refs"],
            self._stats["fetched"],
            self._stats["fetch_err"],
            len(self.store.glob_patterns),
            len(self.store.entries),
        )
        return CrawlResult(
            glob_patterns=self.store.glob_patterns,
            entries=self.store.entries,
            stats=dict(self._stats),
        )

    # ------------------------------------------------------------------
    # Seed
    # ------------------------------------------------------------------

    def _seed(self) -> None:
        # index.html is always cached: admin scripts are injected into it
        self.store.add_fixed(INDEX_FILENAME)
        self.store.add_fixed(with_app_param(ADMIN_SCRIPT_PATH, self.app_name))

        self._seed_registered_urls()
        self._seed_local_files()
        self._seed_plugins()

    def _seed_registered_urls(self) -> None:
        base = self.config.local_base_url
        for raw in self.context.urls_to_cache:
            url = raw if is_absolute_url(raw) else f"{base}/{raw.lstrip('/')}"
            self.store.add(url)
            self._known.add(self.store.canonical(url))
            fetch_url = url
            if base and url.startswith(base):
                fetch_url = with_app_param(strip_app_param(url, self.app_name), self.app_name)
            result = self._fetch(fetch_url)
            if result is not None and result.is_script:
                self._enqueue(ContentTask(url, result.text))

    def _seed_local_files(self) -> None:
        if not self.asset_root.is_dir():
            log.warning("Asset root %s does not exist", self.asset_root)
            return
        for path in self.file_system.list_files():
            rel = self.file_system.relative(path)
            if rel == SW_FILENAME:
                continue

            if path.suffix.lower() in ANALYZED_EXTENSIONS:
                self._enqueue(FileTask(rel, path))

            if rel == INDEX_FILENAME:
                continue
            self.store.add_glob(rel)

    def _seed_plugins(self) -> None:
        for plugin in self.context.front_end_plugins():
            self.store.add(plugin.served_url)
            if plugin.lib_path is None:
                log.warning("Plugin %s has no front-end path – %s not analysed",
                            plugin.plugin_id, plugin.served_url)
                continue
            self._enqueue(FileTask(plugin.served_url, plugin.lib_path))

    # ------------------------------------------------------------------
    # Draining
    # ------------------------------------------------------------------

    def _enqueue(self, task: CrawlTask) -> None:
        self._known.add(self.store.canonical(task.identity))
        self._queue.append(task)
        log.debug("[QUEUE] %s (%d queued)", task.identity, len(self._queue))

    def _extract(self, task: CrawlTask) -> list[str]:
        if isinstance(task, ContentTask):
            return extract_js_imports(task.text, task.identity)

        suffix = task.suffix
        if suffix not in ANALYZED_EXTENSIONS:
            return []
        try:
            content = task.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.error("[ERR] Could not read %s – %s", task.path, exc)
            self._stats["read_err"] += 1
            return []
        if suffix == ".html":
            return extract_html_refs(content)
        return extract_js_imports(content, task.identity)

    def _process(self, task: CrawlTask) -> None:
        self._stats["tasks"] += 1
        refs = self._extract(task)
        for raw in refs:
            resolution = resolve_reference(
                raw, task,
                local_base_url=self.config.local_base_url,
                app_name=self.app_name,
                asset_root=self.asset_root,
            )
            if resolution is None:
                log.debug("[SKIP] %s in %s", raw, task.identity)
                continue
            self._stats["refs"] += 1
            self._follow(resolution)
            self.store.add(resolution.url)

    def _follow(self, resolution: Resolution) -> None:
        """Fetch or queue *resolution* unless its key is already known."""
        key = resolution.url
        if key in self._known or key in self.store:
            log.debug("[DUP] %s", key)
            return
        self._known.add(key)

        if resolution.is_remote:
            result = self._fetch(resolution.fetch_url)
            if result is not None and result.is_script:
                self._enqueue(ContentTask(resolution.fetch_url, result.text))
        else:
            # Not part of the directory listing: only gets a timestamp revision
            self._enqueue(FileTask(resolution.url, resolution.file_path))

    def _fetch(self, url: str) -> FetchResult | None:
        log.info("[FETCH] %s", url)
        result = self.fetcher.fetch(url)
        if result is None or not result.ok:
            self._stats["fetch_err"] += 1
        else:
            self._stats["fetched"] += 1
        return result
