"""Syntax tree backends and position mapping."""

from .base import (
    GrammarUnavailableError,
    QueryConstructionError,
    ScopeNode,
    SyntaxBackend,
    TextEdit,
)
from .lines import LineIndex
from .python_ast import PythonAstBackend, PythonAstTree
from .runtime import BACKEND_CHOICES, build_backend
from .treesitter import GRAMMARS, TreeSitterBackend, build_scope_query_source

__all__ = [
    "BACKEND_CHOICES",
    "GRAMMARS",
    "GrammarUnavailableError",
    "LineIndex",
    "PythonAstBackend",
    "PythonAstTree",
    "QueryConstructionError",
    "ScopeNode",
    "SyntaxBackend",
    "TextEdit",
    "TreeSitterBackend",
    "build_backend",
    "build_scope_query_source",
]
