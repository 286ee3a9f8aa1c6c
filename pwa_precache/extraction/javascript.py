"""
ES module import extraction.

The source is parsed with tree-sitter's JavaScript grammar, which accepts the
newest syntax (top-level ``await``, optional chaining, import attributes).
Only two node shapes matter:

* ``import_statement``   – ``import x from 'mod'`` / ``import 'mod'``
* ``call_expression``    – ``import('mod')`` when its callee is ``import``

Every other node is only descended into.
"""

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from pwa_precache.utils.log import log

JS_LANGUAGE = Language(tree_sitter_javascript.language())

_parser = Parser(JS_LANGUAGE)


_SINGLE_ESCAPES = {
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v",
}


def _unescape(seq: str) -> str:
    """Decode one JS ``escape_sequence`` (``\\n``, ``\\x41``, ``\\u{1F600}`` …)."""
    body = seq[1:]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("u", "x") and len(body) > 1:
        return chr(int(body[1:], 16))
    if body[:1] and body[:1] in "01234567":
        return chr(int(body, 8))
    if body[:1] in ("\r", "\n", "\u2028", "\u2029"):
        # line continuation
        return ""
    return _SINGLE_ESCAPES.get(body, body)


def _string_value(node: Node | None) -> str | None:
    """Value of a plain string literal node, ``None`` for anything else."""
    if node is None or node.type != "string":
        return None
    parts = []
    for child in node.named_children:
        text = child.text.decode("utf-8", errors="replace")
        parts.append(_unescape(text) if child.type == "escape_sequence" else text)
    return "".join(parts)


def _dynamic_import_source(node: Node) -> str | None:
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "import":
        return None
    args = node.child_by_field_name("arguments")
    if args is None or not args.named_children:
        return None
    # import(someVariable) cannot be resolved statically
    return _string_value(args.named_children[0])


def find_import_specifiers(root: Node) -> list[str]:
    """Collect static and literal dynamic import specifiers under *root*,
    in document order."""
    found: list[str] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "import_statement":
            specifier = _string_value(node.child_by_field_name("source"))
            if specifier is not None:
                found.append(specifier)
        elif node.type == "call_expression":
            specifier = _dynamic_import_source(node)
            if specifier is not None:
                found.append(specifier)
        stack.extend(reversed(node.children))
    return found


def extract_js_imports(source: str, origin: str = "<inline>") -> list[str]:
    """
    Return every import specifier of the ES module *source*.

    Parse failures are logged and yield an empty list; *origin* only names
    the source in log messages.
    """
    tree = _parser.parse(source.encode("utf-8"))
    if tree.root_node.has_error:
        log.error("[ERR] Could not parse JS %s – no references taken from it", origin)
        return []
    specs = find_import_specifiers(tree.root_node)
    log.info("Parsed JS %s, found %d import(s)", origin, len(specs))
    log.debug("  imports of %s: %s", origin, specs)
    return specs
