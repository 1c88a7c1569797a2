"""Tree-sitter backend with a combined alternation query per kind set."""

from __future__ import annotations

import importlib
from typing import Any

import tree_sitter
from tree_sitter import Query, QueryCursor, QueryError

from scope_echo.syntax.base import (
    GrammarUnavailableError,
    QueryConstructionError,
    ScopeNode,
    TextEdit,
)

SCOPE_CAPTURE = "scope"

# language key -> (grammar module, language function)
GRAMMARS: dict[str, tuple[str, str]] = {
    "python": ("tree_sitter_python", "language"),
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "go": ("tree_sitter_go", "language"),
    "rust": ("tree_sitter_rust", "language"),
    "java": ("tree_sitter_java", "language"),
    "c": ("tree_sitter_c", "language"),
    "cpp": ("tree_sitter_cpp", "language"),
    "json": ("tree_sitter_json", "language"),
    "yaml": ("tree_sitter_yaml", "language"),
}

_LANGUAGE_CACHE: dict[str, tree_sitter.Language] = {}


def load_language(language: str) -> tree_sitter.Language:
    """Load and cache the tree-sitter grammar for a language key."""
    cached = _LANGUAGE_CACHE.get(language)
    if cached is not None:
        return cached
    grammar = GRAMMARS.get(language)
    if grammar is None:
        raise GrammarUnavailableError(f"No tree-sitter grammar registered for: {language}")
    module_name, function_name = grammar
    try:
        module = importlib.import_module(module_name)
        language_fn = getattr(module, function_name)
    except (ImportError, AttributeError) as err:
        raise GrammarUnavailableError(f"Language not available: {language}") from err
    loaded = tree_sitter.Language(language_fn())
    _LANGUAGE_CACHE[language] = loaded
    return loaded


def build_scope_query_source(kinds: tuple[str, ...]) -> str:
    """Return one alternation query matching every kind under a shared capture."""
    return "\n".join(f"({kind}) @{SCOPE_CAPTURE}" for kind in kinds)


class TreeSitterBackend:
    """Incremental tree-sitter parser for one language key."""

    name = "tree-sitter"

    def __init__(self, language: str) -> None:
        self.language = language
        self._language = load_language(language)
        self._parser = tree_sitter.Parser(self._language)
        self._queries: dict[tuple[str, ...], Query | None] = {}

    def parse(self, source: bytes, previous: object | None = None) -> tree_sitter.Tree:
        """Parse source bytes, incrementally when an edited tree is supplied."""
        if previous is None:
            return self._parser.parse(source)
        return self._parser.parse(source, old_tree=previous)

    def apply_edit(self, tree: object, edit: TextEdit) -> None:
        """Record an edit on the previous tree ahead of reparsing."""
        tree.edit(  # type: ignore[attr-defined]
            start_byte=edit.start_byte,
            old_end_byte=edit.old_end_byte,
            new_end_byte=edit.new_end_byte,
            start_point=edit.start_point,
            old_end_point=edit.old_end_point,
            new_end_point=edit.new_end_point,
        )

    def query(self, tree: object | None, kinds: tuple[str, ...]) -> list[ScopeNode]:
        """Run the combined scope query and return nodes in match order."""
        if tree is None or not kinds:
            return []
        compiled = self._compiled_query(kinds)
        if compiled is None:
            return []
        root: Any = tree.root_node  # type: ignore[attr-defined]
        matches: list[tuple[int, dict[str, list[Any]]]] = QueryCursor(compiled).matches(root)
        nodes: list[ScopeNode] = []
        for _pattern_idx, captures in matches:
            for node in captures.get(SCOPE_CAPTURE, []):
                nodes.append(
                    ScopeNode(kind=node.type, start_byte=node.start_byte, end_byte=node.end_byte)
                )
        return nodes

    def _compiled_query(self, kinds: tuple[str, ...]) -> Query | None:
        if kinds in self._queries:
            return self._queries[kinds]
        known = tuple(
            kind for kind in kinds if self._language.id_for_node_kind(kind, True) is not None
        )
        compiled: Query | None = None
        if known:
            try:
                compiled = Query(self._language, build_scope_query_source(known))
            except QueryError as err:
                raise QueryConstructionError(
                    f"Scope query failed for {self.language}: {err}"
                ) from err
        self._queries[kinds] = compiled
        return compiled
