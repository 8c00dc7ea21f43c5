"""Module-reference extractors for JavaScript source text.

An extractor turns file text into the module names it references, in source
order. Supported syntax:

    - CommonJS:   require("fs")
    - AMD:        define(["a", "b"], factory), require(["a"], callback)
    - ES modules: import x from "y", import "y", export { a } from "y",
                  export * from "y"
    - Dynamic:    import("y")

Two backends are provided:

    TreeSitterExtractor  syntax-aware; raises SourceSyntaxError on files
                         that do not parse
    RegexExtractor       best effort on raw text; never raises

The walker only depends on the ReferenceExtractor protocol, so tests can
substitute their own.
"""

from __future__ import annotations

import re
import threading
from typing import Any, Protocol

import tree_sitter_javascript
from tree_sitter import Language, Parser

from ..exceptions import InvalidConfigError, SourceSyntaxError

JS_LANGUAGE = Language(tree_sitter_javascript.language())


class ReferenceExtractor(Protocol):
    """Capability interface: source text in, module references out."""

    def extract(self, text: str) -> list[str]:
        """Return module references in source order.

        Raises:
            SourceSyntaxError: If the text cannot be parsed
        """
        ...


# ── tree-sitter backend ────────────────────────────────────────


_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|.)", re.DOTALL)

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


def _unescape_match(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        return chr(int(seq[2:-1], 16))
    if seq[0] in "ux" and len(seq) > 1:
        return chr(int(seq[1:], 16))
    if seq in ("\n", "\r", "\r\n", "\u2028", "\u2029"):
        # line continuation
        return ""
    return _SIMPLE_ESCAPES.get(seq, seq)


def unescape_js(raw: str) -> str:
    """Resolve JavaScript escape sequences in the body of a string literal."""
    if "\\" not in raw:
        return raw
    return _ESCAPE.sub(_unescape_match, raw)


def _string_value(node: Any) -> str | None:
    """Return the value of a string literal or a substitution-free template.

    Template literals with ${...} parts are not static and yield None.
    """
    if node is None or node.text is None:
        return None
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
    elif node.type != "string":
        return None
    value = unescape_js(node.text.decode("utf-8", errors="replace")[1:-1])
    return value or None


def _first_error_line(root: Any) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return int(node.start_point[0]) + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return 0


class TreeSitterExtractor:
    """Extract references by walking a tree-sitter JavaScript syntax tree."""

    def __init__(self) -> None:
        # Parsers are not shared between worker threads
        self._local = threading.local()

    def _parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = Parser(JS_LANGUAGE)
            self._local.parser = parser
        return parser

    def extract(self, text: str) -> list[str]:
        tree = self._parser().parse(text.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            line = _first_error_line(root)
            raise SourceSyntaxError(f"invalid JavaScript near line {line}", line=line)
        return self._collect(root)

    def _collect(self, root: Any) -> list[str]:
        references: list[str] = []
        # Pre-order, left to right, so references come out in source order
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in ("import_statement", "export_statement"):
                source = _string_value(node.child_by_field_name("source"))
                if source:
                    references.append(source)
            elif node.type == "call_expression":
                references.extend(self._call_references(node))
            stack.extend(reversed(node.children))
        return references

    @staticmethod
    def _call_references(node: Any) -> list[str]:
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None or arguments.type != "arguments":
            return []
        args = [child for child in arguments.named_children if child.type != "comment"]
        if not args:
            return []

        if function.type == "import":
            value = _string_value(args[0])
            return [value] if value else []

        if function.type != "identifier" or function.text not in (b"require", b"define"):
            return []

        if function.text == b"require":
            value = _string_value(args[0])
            if value:
                return [value]

        # AMD: the first array argument lists the dependencies
        for arg in args:
            if arg.type == "array":
                values = (_string_value(element) for element in arg.named_children)
                return [v for v in values if v]
        return []


# ── regex backend ──────────────────────────────────────────────

_REFERENCE_PATTERN = re.compile(
    r"""
    (?<![.\w$])import\s+(?:[\w$*{}\s,]+?\s+from\s*)?(?P<q1>["'])(?P<es>[^"'\n]+)(?P=q1)
    | (?<![.\w$])export\s*(?:\*(?:\s*as\s+[\w$]+)?|\{[^}]*\})\s*from\s*(?P<q2>["'])(?P<reexport>[^"'\n]+)(?P=q2)
    | (?<![.\w$])(?:require|import)\s*\(\s*(?P<q3>["'])(?P<call>[^"'\n]+)(?P=q3)\s*\)
    | (?<![.\w$])(?:define|require)\s*\(\s*(?:(?P<q4>["'])[^"'\n]*(?P=q4)\s*,\s*)?\[(?P<amd>[^\]]*)\]
    """,
    re.VERBOSE,
)

_QUOTED = re.compile(r"""(["'])([^"'\n]+)\1""")


class RegexExtractor:
    """Best-effort extraction from raw text.

    Does not understand comments or strings, so references inside them are
    reported too. Never raises.
    """

    def extract(self, text: str) -> list[str]:
        references: list[str] = []
        for match in _REFERENCE_PATTERN.finditer(text):
            single = match.group("es") or match.group("reexport") or match.group("call")
            if single:
                references.append(unescape_js(single))
            elif match.group("amd") is not None:
                references.extend(
                    unescape_js(m.group(2)) for m in _QUOTED.finditer(match.group("amd"))
                )
        return references


def create_extractor(name: str) -> ReferenceExtractor:
    """Build the extractor backend selected by configuration."""
    if name == "treesitter":
        return TreeSitterExtractor()
    if name == "regex":
        return RegexExtractor()
    raise InvalidConfigError("extractor", name, "must be one of treesitter, regex")
