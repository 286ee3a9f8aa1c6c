"""
Tests for ES module import and HTML CDN reference extraction.
"""

import unittest

from pwa_precache.extraction.html_parser import extract_html_refs
from pwa_precache.extraction.javascript import extract_js_imports


class TestJsImportExtraction(unittest.TestCase):
    def test_static_import(self):
        js = "import x from 'mod';\nconsole.log(x);"
        self.assertEqual(extract_js_imports(js), ["mod"])

    def test_side_effect_and_named_imports(self):
        js = (
            "import './polyfill.js';\n"
            "import { a, b as c } from \"./lib/util.mjs\";\n"
            "import * as ns from 'https://cdn.example.com/ns.js';\n"
        )
        self.assertEqual(
            extract_js_imports(js),
            ["./polyfill.js", "./lib/util.mjs", "https://cdn.example.com/ns.js"],
        )

    def test_import_nested_in_blocks(self):
        js = """
        function outer() {
            if (window.ready) {
                for (const item of list) {
                    import x from 'mod';
                }
            }
        }
        """
        self.assertIn("mod", extract_js_imports(js))

    def test_dynamic_import_literal(self):
        js = "const m = await import('literal');"
        self.assertEqual(extract_js_imports(js), ["literal"])

    def test_dynamic_import_inside_expression(self):
        js = "button.onclick = () => import('./lazy.mjs').then(m => m.run());"
        self.assertEqual(extract_js_imports(js), ["./lazy.mjs"])

    def test_dynamic_import_variable_skipped(self):
        js = "const name = './x.js';\nimport(someVariable);\nimport(`./tpl-${name}.js`);"
        self.assertEqual(extract_js_imports(js), [])

    def test_dynamic_import_variable_does_not_hide_literals(self):
        js = "import(someVariable);\nimport('./ok.js');"
        self.assertEqual(extract_js_imports(js), ["./ok.js"])

    def test_modern_syntax(self):
        js = """
        import config from './config.js';
        const data = await fetch('/api')?.json?.();
        const total = data?.items?.length ?? 0;
        class Store { #items = []; static { this.ready = true; } }
        export default total;
        """
        self.assertEqual(extract_js_imports(js), ["./config.js"])

    def test_document_order_and_duplicates_kept(self):
        js = "import a from './a.js';\nimport('./b.js');\nimport again from './a.js';"
        self.assertEqual(extract_js_imports(js), ["./a.js", "./b.js", "./a.js"])

    def test_require_and_fetch_not_collected(self):
        js = "fetch('/data.json');\nconst x = require('./legacy.js');"
        self.assertEqual(extract_js_imports(js), [])

    def test_parse_failure_yields_nothing(self):
        js = "import { from 'broken'\nfunction ( {"
        with self.assertLogs("pwa-precache", level="ERROR"):
            result = extract_js_imports(js, "broken.js")
        self.assertEqual(result, [])

    def test_escape_sequences_decoded(self):
        js = (
            "import x from 'dir\\'s/a.js';\n"
            "import('\\x41.js');\n"
            "import y from \"\\u{42}.js\";\n"
            "import z from './\\u0043.js';\n"
        )
        self.assertEqual(extract_js_imports(js), ["dir's/a.js", "A.js", "B.js", "./C.js"])

    def test_empty_source(self):
        self.assertEqual(extract_js_imports(""), [])


class TestHtmlRefExtraction(unittest.TestCase):
    def test_preconnect_excluded(self):
        html = (
            '<link rel="preconnect" href="https://fonts.example.com">'
            '<script src="https://cdn.example.com/a.js">'
        )
        self.assertEqual(extract_html_refs(html), ["https://cdn.example.com/a.js"])

    def test_local_references_ignored(self):
        html = """
        <html><head>
          <link rel="stylesheet" href="/css/site.css">
          <script type="module" src="./js/app.js"></script>
          <script src="http://insecure.example.com/old.js"></script>
        </head><body></body></html>
        """
        self.assertEqual(extract_html_refs(html), [])

    def test_document_order(self):
        html = """
        <html><head>
          <script src="https://cdn.example.com/first.js"></script>
          <link rel="stylesheet" href="https://cdn.example.com/style.css">
        </head><body>
          <script src="https://cdn.example.com/last.js"></script>
        </body></html>
        """
        self.assertEqual(
            extract_html_refs(html),
            [
                "https://cdn.example.com/first.js",
                "https://cdn.example.com/style.css",
                "https://cdn.example.com/last.js",
            ],
        )

    def test_inline_script_and_anchor_ignored(self):
        html = (
            '<a href="https://example.com/page">x</a>'
            "<script>import('https://cdn.example.com/inline.js')</script>"
        )
        self.assertEqual(extract_html_refs(html), [])

    def test_multi_valued_rel_with_preconnect(self):
        html = '<link rel="dns-prefetch preconnect" href="https://fonts.example.com">'
        self.assertEqual(extract_html_refs(html), [])


if __name__ == "__main__":
    unittest.main()
