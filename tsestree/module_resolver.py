"""
Module resolver for program construction.

Resolves import specifiers of a source file to files on disk:
- Relative specifiers (./x, ../x)
- Non-relative specifiers under compilerOptions.baseUrl
- TypeScript extensions first, then JavaScript, then directory index files
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional

ResolutionKind = Literal["relative", "base_url"]

# Extensions probed in order; '' keeps a specifier that already names a file
PROBE_EXTENSIONS = ['.ts', '.tsx', '.d.ts', '.js', '.jsx', '.mjs', '.cjs', '.json', '']
INDEX_NAMES = ['index.ts', 'index.tsx', 'index.d.ts', 'index.js', 'index.jsx', 'index.mjs', 'index.cjs']


@dataclass(frozen=True)
class ResolvedModule:
    """Result of resolving an import specifier."""
    specifier: str
    file_path: str
    kind: ResolutionKind
    extension: str = ""


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith('./') or specifier.startswith('../') or specifier in ('.', '..')


def _try_file_extensions(base_path: str, tried_paths: List[str]) -> Optional[str]:
    """Try to find file with various TypeScript/JavaScript extensions."""
    # Remove extension if already present; './a.js' may name './a.ts'
    stem = base_path
    for ext in PROBE_EXTENSIONS[:-1]:
        if stem.endswith(ext):
            stem = stem[:-len(ext)]
            break

    for ext in PROBE_EXTENSIONS:
        file_path = stem + ext if ext else base_path
        tried_paths.append(file_path)
        if os.path.isfile(file_path):
            return file_path
    return None


def _try_directory_index(dir_path: str, tried_paths: List[str]) -> Optional[str]:
    """Try to find index file in directory (TypeScript or JavaScript)."""
    if not os.path.isdir(dir_path):
        return None

    for index_name in INDEX_NAMES:
        index_path = os.path.join(dir_path, index_name)
        tried_paths.append(index_path)
        if os.path.isfile(index_path):
            return index_path
    return None


def _resolve_path(base_path: str) -> Optional[str]:
    tried_paths: List[str] = []
    return _try_file_extensions(base_path, tried_paths) or _try_directory_index(base_path, tried_paths)


def resolve_module_name(specifier: str, containing_file: str,
                        compiler_options: Optional[Dict[str, Any]] = None) -> Optional[ResolvedModule]:
    """
    Resolve an import specifier from a containing file.

    Args:
        specifier: The module specifier as written in the source
        containing_file: Absolute path of the importing file
        compiler_options: Compiler options of the program (for baseUrl)

    Returns:
        ResolvedModule, or None for unresolved or external modules
    """
    compiler_options = compiler_options or {}

    if is_relative_specifier(specifier):
        base_path = os.path.normpath(os.path.join(os.path.dirname(containing_file), specifier))
        resolved = _resolve_path(base_path)
        if resolved is None:
            return None
        return ResolvedModule(specifier, os.path.abspath(resolved), "relative",
                              os.path.splitext(resolved)[1])

    base_url = compiler_options.get('baseUrl')
    if base_url and not os.path.isabs(specifier):
        resolved = _resolve_path(os.path.join(base_url, specifier))
        if resolved is not None:
            return ResolvedModule(specifier, os.path.abspath(resolved), "base_url",
                                  os.path.splitext(resolved)[1])

    return None
