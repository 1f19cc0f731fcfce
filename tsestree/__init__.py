"""
tsestree: ESTree-shaped syntax trees for TypeScript, built on Tree-sitter.

This package converts tree-sitter TypeScript/TSX trees into the ESTree/TSESTree
shape used by lint tooling, resolves which tsconfig project a file belongs to,
and keeps a queryable correspondence between native and standardized nodes.
"""

from .types import (
    AST_NODE_TYPES, AST_TOKEN_TYPES, Node, Token, Comment, Position, SourceLocation, NodeRange
)

from .errors import (
    TSESTreeError, InvalidOptions, MissingFilePath, ProjectNotFound, ProjectLoadError,
    UnknownNodeType, TypeScriptDiagnosticError, ParseError
)

from .options import (
    RawOptions, NormalizedConfig, normalize_options, validate_options, load_options_file, find_options_file
)

from .registry import ProjectRegistry, get_registry

from .services import ParserServices, create_parser_services

from .parser import ParseResult, parse, parse_and_generate_services

__version__ = "0.1.0"

__all__ = [
    # Types
    "AST_NODE_TYPES", "AST_TOKEN_TYPES", "Node", "Token", "Comment", "Position",
    "SourceLocation", "NodeRange",

    # Errors
    "TSESTreeError", "InvalidOptions", "MissingFilePath", "ProjectNotFound",
    "ProjectLoadError", "UnknownNodeType", "TypeScriptDiagnosticError", "ParseError",

    # Options
    "RawOptions", "NormalizedConfig", "normalize_options", "validate_options",
    "load_options_file", "find_options_file",

    # Projects and services
    "ProjectRegistry", "get_registry", "ParserServices", "create_parser_services",

    # Entry points
    "ParseResult", "parse", "parse_and_generate_services",
]
