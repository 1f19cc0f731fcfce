"""Turns one SourceFile into a standardized tree plus its correspondence maps."""

import logging
from typing import Any, Tuple

from .compiler import SourceFile, get_syntactic_diagnostics
from .convert import Converter
from .errors import ParseError
from .node_maps import AstMaps
from .node_utils import convert_comments, convert_tokens
from .types import Node

logger = logging.getLogger(__name__)


def ast_converter(source_file: SourceFile, config: Any) -> Tuple[Node, AstMaps]:
    """
    Convert a source file.

    Args:
        source_file: Parsed file to convert
        config: NormalizedConfig controlling positions, tokens and comments

    Returns:
        (root Program node, AstMaps)

    Raises:
        ParseError: if the native tree contains syntax errors
        UnknownNodeType: for unrecognized kinds when errorOnUnknownASTType is set
    """
    diagnostics = get_syntactic_diagnostics(source_file)
    if diagnostics:
        logger.debug(f"{source_file.file_name} has {len(diagnostics)} syntax errors")
        raise ParseError(diagnostics[0])

    maps = AstMaps()
    converter = Converter(source_file, config, maps=maps)
    root = converter.convert_program()

    if config.comment:
        root.comments = convert_comments(source_file, loc=config.loc, range=config.range)
    if config.tokens:
        root.tokens = convert_tokens(source_file, loc=config.loc, range=config.range, maps=maps)

    logger.debug(f"Converted {source_file.file_name}: {len(maps.standard_to_native)} map entries")
    return root, maps
