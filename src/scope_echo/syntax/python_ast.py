"""Python AST backend speaking the tree-sitter node kind vocabulary."""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass

from scope_echo.syntax.base import ScopeNode, TextEdit
from scope_echo.syntax.lines import LineIndex

_ELSE_LINE = re.compile(r"\s*(?P<keyword>else)\s*:")

_KIND_BY_NODE: dict[type[ast.AST], str] = {
    ast.ClassDef: "class_definition",
    ast.FunctionDef: "function_definition",
    ast.AsyncFunctionDef: "function_definition",
    ast.If: "if_statement",
    ast.For: "for_statement",
    ast.AsyncFor: "for_statement",
    ast.While: "while_statement",
    ast.With: "with_statement",
    ast.AsyncWith: "with_statement",
    ast.Try: "try_statement",
    ast.TryStar: "try_statement",
    ast.Match: "match_statement",
}


@dataclass(slots=True, frozen=True)
class PythonAstTree:
    """Parsed module together with the source it was parsed from."""

    module: ast.Module
    source: bytes
    lines: LineIndex


class PythonAstBackend:
    """Stdlib-only backend for Python buffers."""

    name = "ast"
    language = "python"

    def parse(self, source: bytes, previous: object | None = None) -> PythonAstTree | None:
        """Parse source bytes; the previous tree is never reused."""
        _ = previous
        try:
            module = ast.parse(source)
        except (SyntaxError, ValueError):
            return None
        return PythonAstTree(module=module, source=source, lines=LineIndex(source))

    def apply_edit(self, tree: object, edit: TextEdit) -> None:
        """AST trees are rebuilt on every parse."""
        _ = tree
        _ = edit

    def query(self, tree: object | None, kinds: tuple[str, ...]) -> list[ScopeNode]:
        """Return matching nodes in pre-order, the order tree-sitter emits matches."""
        if not isinstance(tree, PythonAstTree) or not kinds:
            return []
        collector = _ScopeCollector(tree, frozenset(kinds))
        collector.visit(tree.module)
        return collector.nodes


class _ScopeCollector(ast.NodeVisitor):
    """Collect scope nodes before visiting their children.

    ``elif`` and ``else`` branches are reported as separate clauses covering
    only their own body, as tree-sitter does.
    """

    def __init__(self, tree: PythonAstTree, kinds: frozenset[str]) -> None:
        self.nodes: list[ScopeNode] = []
        self._tree = tree
        self._kinds = kinds

    def generic_visit(self, node: ast.AST) -> None:
        kind = _KIND_BY_NODE.get(type(node))
        if kind is not None:
            self._record_statement(node, kind)
        for name, value in ast.iter_fields(node):
            if kind is not None and name == "orelse" and value and not self._is_elif(value):
                self._record_else(node, value)
            if isinstance(value, list):
                for item in value:
                    if isinstance(item, ast.AST):
                        self.visit(item)
            elif isinstance(value, ast.AST):
                self.visit(value)

    def _offset(self, line: int, column: int) -> int:
        return self._tree.lines.offset_at(line, column)

    def _end_offset(self, node: ast.AST) -> int:
        end_line = node.end_lineno or node.lineno  # type: ignore[attr-defined]
        return self._offset(end_line, node.end_col_offset or 0)  # type: ignore[attr-defined]

    def _is_elif(self, orelse: list[ast.stmt]) -> bool:
        if len(orelse) != 1 or not isinstance(orelse[0], ast.If):
            return False
        start = self._offset(orelse[0].lineno, orelse[0].col_offset)
        return self._tree.source.startswith(b"elif", start)

    def _record_statement(self, node: ast.AST, kind: str) -> None:
        start = self._offset(node.lineno, node.col_offset)  # type: ignore[attr-defined]
        end = self._end_offset(node)
        if isinstance(node, ast.If) and self._tree.source.startswith(b"elif", start):
            kind = "elif_clause"
            end = self._end_offset(node.body[-1])
        self._append(kind, start, end)

    def _record_else(self, node: ast.AST, orelse: list[ast.stmt]) -> None:
        preceding: list[ast.stmt] | list[ast.excepthandler] = node.body  # type: ignore[attr-defined]
        handlers = getattr(node, "handlers", None)
        if handlers:
            preceding = handlers
        floor = preceding[-1].end_lineno or preceding[-1].lineno
        first = orelse[0]
        start = self._offset(first.lineno, 0)
        # the else keyword always opens its own line
        for line in range(first.lineno, floor, -1):
            match = _ELSE_LINE.match(self._tree.lines.line_text(self._offset(line, 0)))
            if match is not None:
                start = self._offset(line, match.start("keyword"))
                break
        self._append("else_clause", start, self._end_offset(orelse[-1]))

    def _append(self, kind: str, start: int, end: int) -> None:
        if kind in self._kinds:
            self.nodes.append(ScopeNode(kind=kind, start_byte=start, end_byte=end))
