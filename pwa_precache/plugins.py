"""
Plugin registry: which extensions an application has installed, which of
them ship a front-end library, and which extra URLs other plugins asked to
cache.

A registry can be built in code or loaded from a JSON document::

    {
      "apps": {
        "demo": {
          "enabled": true,
          "urlsToCache": ["/api/menu.js"],
          "plugins": {
            "charts": {"frontEndLib": "lib/charts.mjs",
                       "frontEndPath": "plugins/charts/front"}
          }
        }
      }
    }

Relative ``frontEndPath`` values are resolved against the JSON file's
directory.
"""

import json
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path

from pwa_precache.config import PLUGIN_ID
from pwa_precache.errors import AppNotFound

# Front-end library this plugin itself injects into every page
SELF_FRONT_END_LIB = "lib/pwa.mjs"


def self_front_end_path() -> Path:
    return Path(str(resources.files("pwa_precache") / "resources" / "front"))


@dataclass(frozen=True)
class PluginInfo:
    plugin_id: str
    front_end_lib: str | None = None
    front_end_path: Path | None = None

    @property
    def served_url(self) -> str:
        return f"/plugin/{self.plugin_id}/{self.front_end_lib}"

    @property
    def lib_path(self) -> Path | None:
        if not self.front_end_lib or self.front_end_path is None:
            return None
        return self.front_end_path / self.front_end_lib


@dataclass
class AppContext:
    app_name: str
    plugins: dict[str, PluginInfo] = field(default_factory=dict)
    urls_to_cache: list[str] = field(default_factory=list)
    enabled: bool = True

    def front_end_plugins(self) -> list[PluginInfo]:
        return [p for p in self.plugins.values() if p.front_end_lib]


class PluginRegistry:
    """Per-application plugin contexts."""

    def __init__(self, apps: dict[str, AppContext] | None = None) -> None:
        self._apps: dict[str, AppContext] = dict(apps or {})

    def register_app(self, context: AppContext) -> AppContext:
        if context.enabled and PLUGIN_ID not in context.plugins:
            context.plugins[PLUGIN_ID] = PluginInfo(
                PLUGIN_ID, SELF_FRONT_END_LIB, self_front_end_path()
            )
        self._apps[context.app_name] = context
        return context

    def register_url_to_cache(self, app_name: str, url: str) -> None:
        """Slot other plugins use to have *url* precached for *app_name*."""
        ctx = self.context_of_app(app_name)
        if url not in ctx.urls_to_cache:
            ctx.urls_to_cache.append(url)

    def context_of_app(self, app_name: str) -> AppContext:
        try:
            return self._apps[app_name]
        except KeyError:
            raise AppNotFound(f"Unknown application {app_name!r}") from None

    def has_capability(self, app_name: str) -> bool:
        ctx = self._apps.get(app_name)
        return ctx is not None and ctx.enabled

    def app_names(self) -> list[str]:
        return sorted(self._apps)

    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict, base_dir: Path | None = None) -> "PluginRegistry":
        registry = cls()
        base_dir = base_dir or Path.cwd()
        for app_name, app in (data.get("apps") or {}).items():
            plugins = {}
            for plugin_id, raw in (app.get("plugins") or {}).items():
                front_path = raw.get("frontEndPath")
                plugins[plugin_id] = PluginInfo(
                    plugin_id=plugin_id,
                    front_end_lib=raw.get("frontEndLib"),
                    front_end_path=(base_dir / front_path) if front_path else None,
                )
            registry.register_app(AppContext(
                app_name=app_name,
                plugins=plugins,
                urls_to_cache=list(app.get("urlsToCache") or []),
                enabled=bool(app.get("enabled", True)),
            ))
        return registry

    @classmethod
    def from_file(cls, path: Path) -> "PluginRegistry":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.from_dict(data, base_dir=Path(path).parent)
