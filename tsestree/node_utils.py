"""
Helpers shared by the converter: positions, literal decoding and the
token/comment passes over the native tree.
"""

import re
from typing import List, Optional, Tuple, Union

import tree_sitter

from .compiler import SourceFile, iter_tree
from .node_maps import AstMaps
from .types import AST_TOKEN_TYPES, Comment, Position, SourceLocation, Token

# Reserved words and strict-mode reserved words; other keywords
# (as, type, of, from, async, string ...) are contextual and lex as identifiers
KEYWORDS = frozenset([
    'break', 'case', 'catch', 'class', 'const', 'continue', 'debugger', 'default',
    'delete', 'do', 'else', 'enum', 'export', 'extends', 'finally', 'for',
    'function', 'if', 'import', 'in', 'instanceof', 'new', 'return', 'super',
    'switch', 'this', 'throw', 'try', 'typeof', 'var', 'void', 'while', 'with',
    'implements', 'interface', 'let', 'package', 'private', 'protected', 'public',
    'static', 'yield',
])

IDENTIFIER_KINDS = frozenset([
    'identifier', 'property_identifier', 'shorthand_property_identifier',
    'shorthand_property_identifier_pattern', 'type_identifier', 'statement_identifier',
    'private_property_identifier',
])

# Native nodes emitted as a single token regardless of their children
SINGLE_TOKEN_KINDS = {
    'string': AST_TOKEN_TYPES.String,
    'regex': AST_TOKEN_TYPES.RegularExpression,
    'jsx_text': AST_TOKEN_TYPES.JSXText,
    'html_character_reference': AST_TOKEN_TYPES.JSXText,
    'number': AST_TOKEN_TYPES.Numeric,
}

# Native kinds whose identifier children are JSX names
JSX_NAME_PARENTS = frozenset([
    'jsx_opening_element', 'jsx_closing_element', 'jsx_self_closing_element', 'jsx_attribute',
])
JSX_NAME_NESTING = frozenset(['member_expression', 'nested_identifier', 'jsx_namespace_name'])

_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0',
}
_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")


def native_location(native: tree_sitter.Node) -> SourceLocation:
    """Line/column span of a native node (line = row + 1, column = byte column)."""
    start_row, start_column = native.start_point[0], native.start_point[1]
    end_row, end_column = native.end_point[0], native.end_point[1]
    return SourceLocation(
        start=Position(line=start_row + 1, column=start_column),
        end=Position(line=end_row + 1, column=end_column),
    )


def span_location(source_file: SourceFile, start: int, end: int) -> SourceLocation:
    """Line/column span of a byte range that is not a whole native node."""
    return SourceLocation(start=source_file.get_position(start), end=source_file.get_position(end))


def unescape_string(raw: str) -> str:
    """
    Decode JavaScript escape sequences in string or template text.

    Raises:
        ValueError: for a code point escape above U+10FFFF
    """

    def replace(match):
        escape = match.group(1)
        if escape.startswith('u{'):
            code_point = int(escape[2:-1], 16)
            if code_point > 0x10FFFF:
                raise ValueError(f"Invalid escape sequence \\{escape}")
            return chr(code_point)
        if escape[0] == 'u' and len(escape) == 5:
            return chr(int(escape[1:], 16))
        if escape[0] == 'x' and len(escape) == 3:
            return chr(int(escape[1:], 16))
        if escape in ('\n', '\r\n', '\r', '\u2028', '\u2029'):
            return ''
        return _ESCAPES.get(escape, escape)

    return _ESCAPE_RE.sub(replace, raw)


def parse_number(raw: str) -> Tuple[Union[int, float], Optional[str]]:
    """
    Numeric value of a number literal.

    Returns:
        (value, bigint) where bigint holds the digits of an ``n``-suffixed literal
    """
    text = raw.replace('_', '')
    bigint = None
    if text.endswith('n'):
        text = text[:-1]
        bigint = text
    lowered = text.lower()
    if lowered.startswith('0x'):
        value: Union[int, float] = int(lowered[2:], 16)
    elif lowered.startswith('0o'):
        value = int(lowered[2:], 8)
    elif lowered.startswith('0b'):
        value = int(lowered[2:], 2)
    elif len(lowered) > 1 and lowered.startswith('0') and lowered.isdigit() and '8' not in lowered \
            and '9' not in lowered:
        value = int(lowered, 8)  # legacy octal
    elif lowered.isdigit():
        value = int(lowered)
    else:
        value = float(lowered)
    if bigint is not None:
        value = int(value)
        bigint = str(value)
    return value, bigint


def _leaf_token_type(native: tree_sitter.Node, text: str, in_jsx_name: bool) -> str:
    kind = native.type
    if kind in IDENTIFIER_KINDS:
        if in_jsx_name:
            return AST_TOKEN_TYPES.JSXIdentifier
        return AST_TOKEN_TYPES.Identifier
    if kind in ('true', 'false'):
        return AST_TOKEN_TYPES.Boolean
    if kind == 'null':
        return AST_TOKEN_TYPES.Null
    if kind in ('this', 'super'):
        return AST_TOKEN_TYPES.Keyword
    if kind == 'undefined':
        return AST_TOKEN_TYPES.Identifier
    if text and (text[0].isalpha() or text[0] in '_$'):
        if text in KEYWORDS:
            return AST_TOKEN_TYPES.Keyword
        return AST_TOKEN_TYPES.JSXIdentifier if in_jsx_name else AST_TOKEN_TYPES.Identifier
    return AST_TOKEN_TYPES.Punctuator


class _TokenBuilder:
    def __init__(self, source_file: SourceFile, loc: bool, range: bool, maps: Optional[AstMaps]):
        self.source_file = source_file
        self.loc = loc
        self.range = range
        self.maps = maps
        self.tokens: List[Token] = []

    def add(self, native: tree_sitter.Node, type: str, start: Optional[int] = None,
            end: Optional[int] = None) -> None:
        whole = start is None
        start = native.start_byte if start is None else start
        end = native.end_byte if end is None else end
        token = Token(type=str(type), value=self.source_file.slice(start, end))
        if self.range:
            token.range = (start, end)
        if self.loc:
            token.loc = native_location(native) if whole else span_location(self.source_file, start, end)
        self.tokens.append(token)
        if self.maps is not None:
            self.maps.register_token(native, token)

    def template(self, native: tree_sitter.Node) -> None:
        # One Template token per quasi chunk; substitutions tokenize normally
        chunk_start = native.start_byte
        for child in native.children:
            if child.type != 'template_substitution':
                continue
            self.add(native, AST_TOKEN_TYPES.Template, chunk_start, child.start_byte + 2)
            for inner in child.children:
                if inner.is_named:
                    self.walk(inner, False)
            chunk_start = child.end_byte - 1
        self.add(native, AST_TOKEN_TYPES.Template, chunk_start, native.end_byte)

    def walk(self, native: tree_sitter.Node, in_jsx_name: bool) -> None:
        kind = native.type
        if kind in ('comment', 'hash_bang_line', 'html_comment'):
            return
        if kind == 'template_string':
            self.template(native)
            return
        if native.is_named and kind in SINGLE_TOKEN_KINDS:
            if kind == 'string' and in_jsx_name:
                # attribute values stay strings
                self.add(native, AST_TOKEN_TYPES.String)
            else:
                self.add(native, SINGLE_TOKEN_KINDS[kind])
            return
        if native.child_count == 0:
            if native.end_byte > native.start_byte:
                text = self.source_file.get_text(native)
                self.add(native, _leaf_token_type(native, text, in_jsx_name))
            return
        child_in_jsx_name = kind in JSX_NAME_PARENTS or (in_jsx_name and kind in JSX_NAME_NESTING)
        for child in native.children:
            self.walk(child, child_in_jsx_name)


def convert_tokens(source_file: SourceFile, loc: bool = False, range: bool = False,
                   maps: Optional[AstMaps] = None) -> List[Token]:
    """
    Build the ordered token list of a file.

    Every token is registered in ``maps`` against the native leaf (or, for
    template chunks, the template string) it was read from.
    """
    builder = _TokenBuilder(source_file, loc, range, maps)
    builder.walk(source_file.root_node, False)
    return builder.tokens


def convert_comments(source_file: SourceFile, loc: bool = False, range: bool = False) -> List[Comment]:
    """Build the ordered comment list of a file."""
    comments = []
    for native in iter_tree(source_file.root_node):
        if native.type != 'comment':
            continue
        text = source_file.get_text(native)
        if text.startswith('//'):
            comment = Comment(type=AST_TOKEN_TYPES.Line.value, value=text[2:])
        else:
            value = text[2:-2] if text.endswith('*/') else text[2:]
            comment = Comment(type=AST_TOKEN_TYPES.Block.value, value=value)
        if range:
            comment.range = (native.start_byte, native.end_byte)
        if loc:
            comment.loc = native_location(native)
        comments.append(comment)
    return comments
