"""
Tests for the command-line interface.
"""

import json
import tempfile
import unittest
from pathlib import Path

from pwa_precache.cli import load_registry, main, parse_args


class TestParseArgs(unittest.TestCase):
    def test_build_options(self):
        args = parse_args(["build", "demo", "--data-dir", "/srv/data",
                           "--timeout", "5", "--no-verify-ssl"])
        self.assertEqual(args.cmd, "build")
        self.assertEqual(args.app, "demo")
        self.assertEqual(args.data_dir, "/srv/data")
        self.assertEqual(args.timeout, 5.0)
        self.assertFalse(args.verify_ssl)

    def test_serve_defaults(self):
        args = parse_args(["serve"])
        self.assertEqual(args.port, 3080)
        self.assertIsNone(args.token)

    def test_command_required(self):
        with self.assertRaises(SystemExit):
            parse_args([])

    def test_default_registry_enables_named_app(self):
        registry = load_registry(parse_args(["build", "demo"]))
        self.assertTrue(registry.has_capability("demo"))


class TestMain(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = self._tmp.name
        self.public = Path(self.data_dir) / "apps" / "demo" / "public"

    def tearDown(self):
        self._tmp.cleanup()

    def run_cli(self, *argv):
        return main([*argv, "--data-dir", self.data_dir])

    def test_prepare_build_clean(self):
        self.assertEqual(self.run_cli("prepare", "demo"), 0)
        self.assertTrue((self.public / "manifest.json").is_file())

        (self.public / "index.html").write_text("<html></html>")
        self.assertEqual(self.run_cli("build", "demo"), 0)
        sw = (self.public / "sw.js").read_text()
        for url in ("manifest.json", "icons/icon.svg", "index.html",
                    "/_openbamz_admin.js?appName=demo",
                    "plugin/open-bamz-pwa/lib/pwa.mjs"):
            self.assertIn(json.dumps(url), sw)

        self.assertEqual(self.run_cli("clean", "demo"), 0)
        self.assertFalse((self.public / "manifest.json").exists())

    def test_build_without_template_fails(self):
        self.assertEqual(self.run_cli("build", "demo"), 1)

    def test_registry_file(self):
        registry_path = Path(self.data_dir) / "plugins.json"
        registry_path.write_text(json.dumps({"apps": {"demo": {"enabled": False}}}))
        registry = load_registry(parse_args(
            ["build", "demo", "--registry", str(registry_path)]))
        self.assertFalse(registry.has_capability("demo"))


if __name__ == "__main__":
    unittest.main()
