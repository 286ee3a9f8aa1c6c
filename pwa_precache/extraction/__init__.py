"""Reference extraction from ES modules and HTML pages."""

from pwa_precache.extraction.html_parser import extract_html_refs
from pwa_precache.extraction.javascript import extract_js_imports

__all__ = ["extract_html_refs", "extract_js_imports"]
