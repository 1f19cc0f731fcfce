"""
Entry points: ``parse`` for a bare standardized tree and
``parse_and_generate_services`` for the tree plus program and node maps.
"""

import logging
from typing import Any, Mapping, NamedTuple, Optional, Union

from .ast_converter import ast_converter
from .compiler import Program, SourceFile, create_source_file, get_syntactic_diagnostics
from .errors import InvalidOptions, TypeScriptDiagnosticError
from .options import NormalizedConfig, RawOptions, normalize_options, validate_options
from .registry import get_registry
from .services import ParserServices, create_parser_services
from .types import Node

logger = logging.getLogger(__name__)

Options = Union[None, Mapping[str, Any], RawOptions]


class ParseResult(NamedTuple):
    ast: Node
    services: ParserServices


def parse(code: str, options: Options = None) -> Node:
    """
    Parse source text into a standardized tree.

    No project is resolved and no services are produced; ``project`` is
    ignored.

    Raises:
        InvalidOptions: for bad options, or when asked to surface
            type-checker diagnostics (only the services entry point can)
        ParseError: if the code has syntax errors
    """
    raw = validate_options(options)
    if raw.error_on_typescript_syntactic_and_semantic_issues:
        raise InvalidOptions(
            '"errorOnTypeScriptSyntacticAndSemanticIssues" is only supported by parse_and_generate_services()'
        )
    config = normalize_options(code, raw, resolve_projects=False)
    source_file = create_source_file(config.file_path, code, jsx=config.jsx)
    ast, _ = ast_converter(source_file, config)
    return ast


def _resolve_program(config: NormalizedConfig) -> Optional[Program]:
    if not config.projects:
        return None
    return get_registry().resolve(
        config.file_path,
        config.projects,
        config.tsconfig_root_dir,
        allow_default_program=config.create_default_program,
        code=config.code,
        extra_file_extensions=config.extra_file_extensions,
        log=config.log,
    )


def _source_file(config: NormalizedConfig, program: Optional[Program]) -> SourceFile:
    if program is not None:
        return program.update_source_file(config.file_path, config.code, jsx=config.jsx)
    return create_source_file(config.file_path, config.code, jsx=config.jsx)


def _check_diagnostics(program: Optional[Program], source_file: SourceFile) -> None:
    if program is not None:
        diagnostics = program.get_syntactic_diagnostics(source_file)
        if not diagnostics:
            diagnostics = program.get_semantic_diagnostics(source_file)
    else:
        diagnostics = get_syntactic_diagnostics(source_file)
    if diagnostics:
        raise TypeScriptDiagnosticError(diagnostics[0])


def parse_and_generate_services(code: str, options: Options = None) -> ParseResult:
    """
    Parse source text and export program and node-map services.

    Returns:
        ParseResult(ast, services). ``services.program`` is None when no
        project covers the file and default programs are disabled.

    Raises:
        InvalidOptions: for bad options
        MissingFilePath: when ``project`` is set without ``filePath``
        ProjectNotFound: if a descriptor does not exist
        ProjectLoadError: if a descriptor is malformed
        TypeScriptDiagnosticError: for the first diagnostic of the file when
            errorOnTypeScriptSyntacticAndSemanticIssues is set
        ParseError: if the code has syntax errors
    """
    config = normalize_options(code, options)
    program = _resolve_program(config)
    if program is None and config.projects:
        config.log(f"{config.file_path} was not found in any of the provided projects; "
                   f"type information will not be available")

    source_file = _source_file(config, program)

    preserve_node_maps = config.preserve_node_maps
    if preserve_node_maps is None:
        preserve_node_maps = bool(config.projects)

    if config.error_on_typescript_syntactic_and_semantic_issues:
        _check_diagnostics(program, source_file)

    ast, maps = ast_converter(source_file, config)
    services = create_parser_services(program, maps, preserve_node_maps)
    return ParseResult(ast, services)
