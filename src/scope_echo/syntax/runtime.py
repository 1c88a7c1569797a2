"""Runtime syntax backend selection."""

from __future__ import annotations

from scope_echo.syntax.base import GrammarUnavailableError, SyntaxBackend
from scope_echo.syntax.python_ast import PythonAstBackend
from scope_echo.syntax.treesitter import TreeSitterBackend

BACKEND_CHOICES = ("tree-sitter", "ast")


def build_backend(language: str, backend: str = "tree-sitter") -> SyntaxBackend:
    """Build the named parsing backend for a language key."""
    if backend not in BACKEND_CHOICES:
        raise ValueError(f"Unknown backend '{backend}'; expected one of {BACKEND_CHOICES}.")
    if backend == "ast":
        if language != PythonAstBackend.language:
            raise GrammarUnavailableError(f"The ast backend only supports python, not {language}.")
        return PythonAstBackend()
    return TreeSitterBackend(language)
