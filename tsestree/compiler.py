"""
Compiler facade over tree-sitter-typescript.

Provides source files (native trees), programs built from project
descriptors, and the syntactic/semantic diagnostics used to surface
compiler errors.
"""

import bisect
import functools
import logging
import os
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Literal, Optional, Sequence, Tuple

import tree_sitter
from tree_sitter_typescript import language_tsx, language_typescript

from .errors import ProjectLoadError
from .module_resolver import is_relative_specifier, resolve_module_name
from .tsconfig import parse_config, supported_extensions
from .types import Position

logger = logging.getLogger(__name__)

GrammarName = Literal["typescript", "tsx"]

TSX_EXTENSIONS = ('.tsx', '.jsx', '.js', '.mjs', '.cjs')
TYPESCRIPT_EXTENSIONS = ('.ts', '.mts', '.cts')

# Diagnostic codes as reported by tsc
DIAGNOSTIC_UNEXPECTED_TOKEN = 1012
DIAGNOSTIC_EXPECTED = 1005
DIAGNOSTIC_MODULE_NOT_FOUND = 2307
DIAGNOSTIC_INVALID_ESCAPE = 1198


def normalize_path(path: str) -> str:
    """Canonical key for a file path."""
    return os.path.normcase(os.path.abspath(path))


@functools.lru_cache(maxsize=None)
def get_language(name: GrammarName) -> tree_sitter.Language:
    """Load (once) the tree-sitter Language for a grammar."""
    if name == "tsx":
        return tree_sitter.Language(language_tsx())
    return tree_sitter.Language(language_typescript())


def select_grammar(file_name: str, jsx: bool = False) -> GrammarName:
    """Pick the grammar for a file based on its extension."""
    lowered = file_name.lower()
    if lowered.endswith(TSX_EXTENSIONS):
        return "tsx"
    if lowered.endswith(TYPESCRIPT_EXTENSIONS):
        return "typescript"
    return "tsx" if jsx else "typescript"


def iter_tree(root: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield every node of a native tree in pre-order."""
    cursor = root.walk()
    visited_children = False
    while True:
        if not visited_children:
            yield cursor.node
            if not cursor.goto_first_child():
                visited_children = True
        elif cursor.goto_next_sibling():
            visited_children = False
        elif not cursor.goto_parent():
            break


class SourceFile:
    """A parsed source file: text, bytes and the native tree."""

    def __init__(self, file_name: str, text: str, language: GrammarName):
        self.file_name = file_name
        self.text = text
        self.source = text.encode('utf-8')
        self.language = language

        parser = tree_sitter.Parser()
        parser.language = get_language(language)
        self.tree = parser.parse(self.source)

        self._line_starts = [0]
        index = self.source.find(b'\n')
        while index != -1:
            self._line_starts.append(index + 1)
            index = self.source.find(b'\n', index + 1)

    @property
    def root_node(self) -> tree_sitter.Node:
        return self.tree.root_node

    def get_text(self, node: tree_sitter.Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')

    def slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode('utf-8', errors='replace')

    def get_position(self, offset: int) -> Position:
        """Convert a byte offset into a 1-based line / 0-based byte column."""
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line=line_index + 1, column=offset - self._line_starts[line_index])

    def module_specifiers(self) -> List[Tuple[str, tree_sitter.Node]]:
        """
        Collect module specifiers referenced by this file.

        Covers import/export ``from`` clauses, ``import x = require()``,
        ``require('x')`` calls and dynamic ``import('x')``.

        Returns:
            List of (specifier, string node) in source order
        """
        specifiers = []
        for node in iter_tree(self.root_node):
            source = None
            if node.type in ('import_statement', 'export_statement', 'import_require_clause'):
                source = node.child_by_field_name('source')
                if source is None and node.type == 'import_require_clause':
                    source = next((c for c in node.named_children if c.type == 'string'), None)
            elif node.type == 'call_expression':
                function = node.child_by_field_name('function')
                arguments = node.child_by_field_name('arguments')
                is_require = function is not None and function.type == 'identifier' \
                    and self.get_text(function) == 'require'
                is_import = function is not None and function.type == 'import'
                if (is_require or is_import) and arguments is not None and arguments.type == 'arguments':
                    first = next((c for c in arguments.named_children if c.type != 'comment'), None)
                    if first is not None and first.type == 'string':
                        source = first
            if source is not None and source.type == 'string':
                specifiers.append((self.get_text(source)[1:-1], source))
        return specifiers

    def __repr__(self) -> str:
        return f"SourceFile({self.file_name!r}, {self.language})"


def create_source_file(file_name: str, text: str, jsx: bool = False) -> SourceFile:
    """Parse text into a SourceFile using the grammar its extension calls for."""
    language = select_grammar(file_name, jsx)
    logger.debug(f"Parsing {file_name} with the {language} grammar")
    return SourceFile(file_name, text, language)


@dataclass(frozen=True)
class Diagnostic:
    """A compiler diagnostic for one location of a file."""
    file_name: str
    start: int
    length: int
    line: int
    column: int
    code: int
    message: str
    category: str = "error"

    def format(self) -> str:
        return f"{self.file_name}:{self.line}:{self.column + 1} - {self.category} TS{self.code}: {self.message}"


def create_diagnostic(source_file: SourceFile, node: tree_sitter.Node, code: int, message: str) -> Diagnostic:
    """Diagnostic covering one native node."""
    position = source_file.get_position(node.start_byte)
    return Diagnostic(
        file_name=source_file.file_name,
        start=node.start_byte,
        length=node.end_byte - node.start_byte,
        line=position.line,
        column=position.column,
        code=code,
        message=message,
    )


def get_syntactic_diagnostics(source_file: SourceFile) -> List[Diagnostic]:
    """ERROR and MISSING nodes of the native tree, in source order."""
    root = source_file.root_node
    if not root.has_error:
        return []

    diagnostics = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            diagnostics.append(
                create_diagnostic(source_file, node, DIAGNOSTIC_EXPECTED, f"'{node.type}' expected."))
            continue
        if node.type == 'ERROR':
            diagnostics.append(
                create_diagnostic(source_file, node, DIAGNOSTIC_UNEXPECTED_TOKEN, "Unexpected token."))
            continue
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))

    diagnostics.sort(key=lambda d: d.start)
    return diagnostics


class Program:
    """
    The source files of a project plus its compiler options.

    Membership is the root files of the descriptor plus the transitive
    relative (or baseUrl) imports of those roots. Default programs have no
    descriptor.
    """

    def __init__(self, config_file_path: Optional[str], options: Dict[str, Any],
                 root_file_names: Sequence[str], extra_file_extensions: Sequence[str] = (),
                 initial_texts: Optional[Dict[str, str]] = None):
        self.config_file_path = config_file_path
        self.options = dict(options)
        self.extra_file_extensions = tuple(extra_file_extensions)
        self._root_file_names = [os.path.abspath(p) for p in root_file_names]
        self._files: Dict[str, SourceFile] = {}
        self._lock = threading.RLock()
        self._extensions = supported_extensions(self.options, self.extra_file_extensions)
        self._build(initial_texts or {})

    @property
    def jsx(self) -> bool:
        return bool(self.options.get('jsx'))

    def _read(self, path: str) -> str:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ProjectLoadError(self.config_file_path or path, f"cannot read {path}: {e}") from e

    def _build(self, initial_texts: Dict[str, str]) -> None:
        queue = deque(self._root_file_names)
        while queue:
            path = queue.popleft()
            key = normalize_path(path)
            if key in self._files:
                continue
            text = initial_texts.get(key)
            if text is None:
                text = self._read(path)
            source_file = create_source_file(path, text, jsx=self.jsx)
            self._files[key] = source_file

            for specifier, _ in source_file.module_specifiers():
                resolved = resolve_module_name(specifier, path, self.options)
                if resolved is None:
                    continue
                if not any(resolved.file_path.endswith(ext) for ext in self._extensions):
                    continue
                if normalize_path(resolved.file_path) not in self._files:
                    queue.append(resolved.file_path)

        logger.debug(f"Built program {self.config_file_path or self._root_file_names[0]} "
                     f"with {len(self._files)} files")

    def get_root_file_names(self) -> List[str]:
        return list(self._root_file_names)

    def get_source_files(self) -> List[SourceFile]:
        with self._lock:
            return list(self._files.values())

    def get_source_file(self, path: str) -> Optional[SourceFile]:
        with self._lock:
            return self._files.get(normalize_path(path))

    def is_member(self, path: str) -> bool:
        with self._lock:
            return normalize_path(path) in self._files

    def get_compiler_options(self) -> Dict[str, Any]:
        return dict(self.options)

    def update_source_file(self, path: str, text: str, jsx: Optional[bool] = None) -> SourceFile:
        """
        Replace a member's source text.

        The existing SourceFile is kept when the text and grammar are
        unchanged, so native node identities stay stable across repeated
        parses. ``jsx`` overrides the program's own setting for files whose
        extension does not decide the grammar.

        Raises:
            KeyError: if the file is not a member of this program
        """
        key = normalize_path(path)
        with self._lock:
            current = self._files.get(key)
            if current is None:
                raise KeyError(path)
            language = select_grammar(current.file_name, self.jsx if jsx is None else jsx)
            if current.text == text and current.language == language:
                return current
            source_file = SourceFile(current.file_name, text, language)
            self._files[key] = source_file
            logger.debug(f"Updated {path} in program {self.config_file_path}")
            return source_file

    def get_syntactic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        return get_syntactic_diagnostics(source_file)

    def get_semantic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        """Relative imports of the file that do not resolve."""
        diagnostics = []
        for specifier, node in source_file.module_specifiers():
            if not is_relative_specifier(specifier):
                continue
            if resolve_module_name(specifier, source_file.file_name, self.options) is None:
                diagnostics.append(create_diagnostic(
                    source_file, node, DIAGNOSTIC_MODULE_NOT_FOUND,
                    f"Cannot find module '{specifier}' or its corresponding type declarations.",
                ))
        return diagnostics

    def __repr__(self) -> str:
        return f"Program({self.config_file_path or self._root_file_names[0]!r}, files={len(self._files)})"


def load_program(config_path: str, extra_file_extensions: Sequence[str] = ()) -> Program:
    """
    Build a Program from a tsconfig descriptor.

    Raises:
        ProjectNotFound: if the descriptor does not exist
        ProjectLoadError: if the descriptor is malformed
    """
    parsed = parse_config(config_path, extra_file_extensions)
    logger.debug(f"Loading program {parsed.config_file_path} with {len(parsed.file_names)} root files")
    return Program(parsed.config_file_path, parsed.compiler_options, parsed.file_names,
                   extra_file_extensions)


def create_default_program(file_path: str, code: Optional[str] = None,
                           options: Optional[Dict[str, Any]] = None,
                           extra_file_extensions: Sequence[str] = ()) -> Program:
    """
    Synthesize a single-file program: the file plus its transitive imports.

    Args:
        file_path: Absolute path of the file
        code: In-memory text of the file; read from disk when None
        options: Compiler options to build with
    """
    initial_texts = {normalize_path(file_path): code} if code is not None else None
    return Program(None, options or {}, [file_path], extra_file_extensions, initial_texts)
