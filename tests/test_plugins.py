"""
Tests for the plugin registry and configuration objects.
"""

import json
import tempfile
import unittest
from pathlib import Path

from pwa_precache.config import BuildConfig
from pwa_precache.errors import AppNotFound
from pwa_precache.plugins import AppContext, PluginInfo, PluginRegistry


class TestPluginInfo(unittest.TestCase):
    def test_served_url_and_lib_path(self):
        info = PluginInfo("charts", "lib/charts.mjs", Path("/opt/charts/front"))
        self.assertEqual(info.served_url, "/plugin/charts/lib/charts.mjs")
        self.assertEqual(info.lib_path, Path("/opt/charts/front/lib/charts.mjs"))

    def test_no_lib_path_without_front_end_path(self):
        self.assertIsNone(PluginInfo("charts", "lib/charts.mjs").lib_path)

    def test_front_end_plugins_filter(self):
        ctx = AppContext("demo", plugins={
            "a": PluginInfo("a", "lib/a.mjs"),
            "b": PluginInfo("b"),
        })
        self.assertEqual([p.plugin_id for p in ctx.front_end_plugins()], ["a"])


class TestPluginRegistry(unittest.TestCase):
    def test_self_plugin_added_when_enabled(self):
        registry = PluginRegistry()
        ctx = registry.register_app(AppContext("demo"))
        own = ctx.plugins["open-bamz-pwa"]
        self.assertEqual(own.served_url, "/plugin/open-bamz-pwa/lib/pwa.mjs")
        self.assertTrue(own.lib_path.is_file())

    def test_disabled_app(self):
        registry = PluginRegistry()
        ctx = registry.register_app(AppContext("off", enabled=False))
        self.assertEqual(ctx.plugins, {})
        self.assertFalse(registry.has_capability("off"))
        self.assertFalse(registry.has_capability("ghost"))

    def test_unknown_app(self):
        with self.assertRaises(AppNotFound) as ctx:
            PluginRegistry().context_of_app("ghost")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_register_url_to_cache(self):
        registry = PluginRegistry()
        registry.register_app(AppContext("demo"))
        registry.register_url_to_cache("demo", "/api/menu.js")
        registry.register_url_to_cache("demo", "/api/menu.js")
        self.assertEqual(registry.context_of_app("demo").urls_to_cache, ["/api/menu.js"])

    def test_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "plugins.json"
            path.write_text(json.dumps({
                "apps": {
                    "demo": {
                        "urlsToCache": ["/api/menu.js"],
                        "plugins": {
                            "charts": {"frontEndLib": "lib/charts.mjs",
                                       "frontEndPath": "plugins/charts/front"},
                        },
                    },
                    "off": {"enabled": False},
                },
            }))
            registry = PluginRegistry.from_file(path)

            self.assertEqual(registry.app_names(), ["demo", "off"])
            demo = registry.context_of_app("demo")
            self.assertEqual(demo.urls_to_cache, ["/api/menu.js"])
            self.assertEqual(demo.plugins["charts"].lib_path,
                             Path(tmp) / "plugins/charts/front/lib/charts.mjs")
            self.assertIn("open-bamz-pwa", demo.plugins)
            self.assertFalse(registry.has_capability("off"))


class TestBuildConfig(unittest.TestCase):
    def test_public_dir(self):
        config = BuildConfig(data_dir="/srv/data")
        self.assertEqual(config.public_dir("demo"), Path("/srv/data/apps/demo/public"))

    def test_base_url_trailing_slash(self):
        config = BuildConfig(local_base_url="http://localhost:3000/")
        self.assertEqual(config.local_base_url, "http://localhost:3000")


if __name__ == "__main__":
    unittest.main()
