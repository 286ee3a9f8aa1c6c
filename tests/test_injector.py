"""
Tests for precache manifest injection into the service-worker template.
"""

import hashlib
import json
import tempfile
import unittest
from pathlib import Path

from pwa_precache.core.injector import build_manifest, file_revision, inject_manifest
from pwa_precache.core.manifest import ManifestEntry
from pwa_precache.errors import InjectionError

TEMPLATE = "importScripts('workbox-sw.js');\nprecacheAndRoute(self.__WB_MANIFEST);\n"


def _injected(sw_path: Path) -> list:
    text = sw_path.read_text(encoding="utf-8")
    start = text.index("precacheAndRoute(") + len("precacheAndRoute(")
    end = text.index(");", start)
    return json.loads(text[start:end])


class TestInjectManifest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "js").mkdir()
        (self.root / "js" / "app.js").write_text("console.log('app');")
        (self.root / "style.css").write_text("body { margin: 0 }")
        self.template = self.root / "sw-template.js"
        self.template.write_text(TEMPLATE)
        self.dest = self.root / "sw.js"

    def tearDown(self):
        self._tmp.cleanup()

    def test_file_revision_is_md5(self):
        expected = hashlib.md5(b"console.log('app');").hexdigest()
        self.assertEqual(file_revision(self.root / "js" / "app.js"), expected)

    def test_globs_then_additional_entries(self):
        extra = [ManifestEntry("index.html", "1"),
                 ManifestEntry("https://cdn.example.com/a.js", "2")]
        result = inject_manifest(self.template, self.dest, self.root,
                                 ["js/app.js", "style.css"], extra)

        entries = _injected(self.dest)
        self.assertEqual([e["url"] for e in entries],
                         ["js/app.js", "style.css", "index.html",
                          "https://cdn.example.com/a.js"])
        self.assertEqual(entries[0]["revision"],
                         hashlib.md5(b"console.log('app');").hexdigest())
        self.assertEqual(entries[2]["revision"], "1")
        self.assertEqual(result.count, 4)
        self.assertNotIn("self.__WB_MANIFEST", self.dest.read_text())
        self.assertIn("importScripts('workbox-sw.js');", self.dest.read_text())

    def test_wildcard_pattern(self):
        inject_manifest(self.template, self.dest, self.root, ["**/*.js"])
        urls = [e["url"] for e in _injected(self.dest)]
        self.assertIn("js/app.js", urls)
        self.assertIn("sw-template.js", urls)

    def test_additional_entry_duplicating_glob_skipped(self):
        inject_manifest(self.template, self.dest, self.root, ["style.css"],
                        [ManifestEntry("style.css", "123")])
        entries = _injected(self.dest)
        self.assertEqual(len(entries), 1)
        self.assertNotEqual(entries[0]["revision"], "123")

    def test_unmatched_pattern_warns(self):
        result = inject_manifest(self.template, self.dest, self.root, ["missing.js"])
        self.assertEqual(result.count, 0)
        self.assertEqual(
            result.warnings,
            ["One of the glob patterns doesn't match any files: missing.js"],
        )
        self.assertEqual(_injected(self.dest), [])

    def test_oversize_file_skipped(self):
        entries, size, warnings = build_manifest(
            self.root, ["js/app.js", "style.css"], [], maximum_file_size=18,
        )
        self.assertEqual([e["url"] for e in entries], ["style.css"])
        self.assertEqual(size, 18)
        self.assertEqual(len(warnings), 1)
        self.assertIn("js/app.js", warnings[0])

    def test_missing_placeholder_raises(self):
        self.template.write_text("precacheAndRoute([]);")
        with self.assertRaises(InjectionError):
            inject_manifest(self.template, self.dest, self.root, [])
        self.assertFalse(self.dest.exists())

    def test_duplicate_placeholder_raises(self):
        self.template.write_text("a(self.__WB_MANIFEST);\nb(self.__WB_MANIFEST);")
        with self.assertRaises(InjectionError):
            inject_manifest(self.template, self.dest, self.root, [])

    def test_missing_template_raises(self):
        with self.assertRaises(InjectionError) as ctx:
            inject_manifest(self.root / "nope.js", self.dest, self.root, [])
        self.assertEqual(ctx.exception.status_code, 500)


if __name__ == "__main__":
    unittest.main()
