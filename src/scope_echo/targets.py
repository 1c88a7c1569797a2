"""Language key to scope node kind registry."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath

DEFAULT_TARGETS: dict[str, tuple[str, ...]] = {
    "python": (
        "class_definition",
        "function_definition",
        "if_statement",
        "elif_clause",
        "else_clause",
        "for_statement",
        "while_statement",
        "with_statement",
        "try_statement",
        "match_statement",
    ),
    "javascript": (
        "class_declaration",
        "function_declaration",
        "method_definition",
        "arrow_function",
        "if_statement",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "switch_statement",
        "try_statement",
    ),
    "typescript": (
        "class_declaration",
        "interface_declaration",
        "function_declaration",
        "method_definition",
        "arrow_function",
        "if_statement",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "switch_statement",
        "try_statement",
    ),
    "tsx": (
        "class_declaration",
        "function_declaration",
        "method_definition",
        "arrow_function",
        "if_statement",
        "for_statement",
        "while_statement",
        "jsx_element",
    ),
    "go": (
        "function_declaration",
        "method_declaration",
        "func_literal",
        "type_declaration",
        "if_statement",
        "for_statement",
        "expression_switch_statement",
        "select_statement",
    ),
    "rust": (
        "function_item",
        "impl_item",
        "trait_item",
        "struct_item",
        "enum_item",
        "mod_item",
        "if_expression",
        "for_expression",
        "while_expression",
        "loop_expression",
        "match_expression",
        "closure_expression",
    ),
    "java": (
        "class_declaration",
        "interface_declaration",
        "method_declaration",
        "constructor_declaration",
        "if_statement",
        "for_statement",
        "enhanced_for_statement",
        "while_statement",
        "switch_expression",
        "try_statement",
    ),
    "c": (
        "function_definition",
        "struct_specifier",
        "if_statement",
        "for_statement",
        "while_statement",
        "switch_statement",
    ),
    "cpp": (
        "function_definition",
        "class_specifier",
        "struct_specifier",
        "namespace_definition",
        "if_statement",
        "for_statement",
        "for_range_loop",
        "while_statement",
        "switch_statement",
    ),
    "json": ("pair",),
    "yaml": ("block_mapping_pair",),
}

EXTENSION_LANGUAGES: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".tsx": "tsx",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def language_for_path(path: str) -> str | None:
    """Return the language key for a file path, or None when unknown."""
    suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
    return EXTENSION_LANGUAGES.get(suffix)


def _unique_kinds(kinds: Iterable[str]) -> tuple[str, ...]:
    ordered: list[str] = []
    for kind in kinds:
        normalized = kind.strip()
        if normalized and normalized not in ordered:
            ordered.append(normalized)
    return tuple(ordered)


@dataclass(slots=True)
class TargetRegistry:
    """Ordered language key to node kind table.

    Lookups for unregistered languages return an empty tuple; a language
    without targets simply gets no annotations.
    """

    _targets: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def with_defaults(cls) -> TargetRegistry:
        """Build a registry pre-populated with the built-in language table."""
        registry = cls()
        for language, kinds in DEFAULT_TARGETS.items():
            registry.register(language, kinds)
        return registry

    def register(self, language: str, kinds: Iterable[str]) -> None:
        """Register or replace the node kinds for one language key."""
        if not language.strip():
            raise ValueError("Target language key must be non-empty.")
        self._targets[language] = _unique_kinds(kinds)

    def targets_for(self, language: str | None) -> tuple[str, ...]:
        """Return the node kinds registered for a language key."""
        if language is None:
            return ()
        return self._targets.get(language, ())

    def languages(self) -> tuple[str, ...]:
        """Return registered language keys in registration order."""
        return tuple(self._targets)

    def with_overrides(self, overrides: Mapping[str, Iterable[str]]) -> TargetRegistry:
        """Return a copy with per-language overrides applied."""
        merged = TargetRegistry(dict(self._targets))
        for language, kinds in overrides.items():
            merged.register(language, kinds)
        return merged
