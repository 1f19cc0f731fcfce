"""
tsconfig.json reading for project descriptors.

Handles the JSON-with-comments syntax, relative ``extends`` chains and the
``files``/``include``/``exclude`` expansion into a sorted list of root files.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Sequence, Set

from .errors import ProjectLoadError, ProjectNotFound

logger = logging.getLogger(__name__)

TS_EXTENSIONS = ('.ts', '.tsx', '.d.ts', '.mts', '.cts')
JS_EXTENSIONS = ('.js', '.jsx', '.mjs', '.cjs')

DEFAULT_INCLUDE = ['**/*']
DEFAULT_EXCLUDE = ['node_modules', 'bower_components', 'jspm_packages']

# Compiler options holding paths relative to the config that declares them
PATH_OPTIONS = ('baseUrl', 'outDir', 'rootDir', 'declarationDir')

# Directories never walked when expanding wildcards
SKIP_DIRS = {'node_modules', 'bower_components', 'jspm_packages'}


@dataclass
class ParsedConfig:
    """A tsconfig with extends applied and file globs expanded."""
    config_file_path: str
    compiler_options: Dict[str, Any] = field(default_factory=dict)
    file_names: List[str] = field(default_factory=list)


def resolve_project_path(descriptor: str, root_dir: str) -> str:
    """Make a descriptor absolute; a directory means its tsconfig.json."""
    path = os.path.abspath(os.path.join(root_dir, descriptor))
    if os.path.isdir(path):
        path = os.path.join(path, 'tsconfig.json')
    return path


def strip_json_comments(text: str) -> str:
    """
    Remove comments and trailing commas from JSON-with-comments text.

    String literals are copied through untouched.
    """
    out = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char == '"':
            end = i + 1
            while end < length and text[end] != '"':
                end += 2 if text[end] == '\\' else 1
            out.append(text[i:end + 1])
            i = end + 1
        elif text.startswith('//', i):
            newline = text.find('\n', i)
            i = length if newline == -1 else newline
        elif text.startswith('/*', i):
            close = text.find('*/', i + 2)
            i = length if close == -1 else close + 2
        else:
            out.append(char)
            i += 1
    stripped = ''.join(out)
    return _remove_trailing_commas(stripped)


def _remove_trailing_commas(text: str) -> str:
    out = []
    in_string = False
    i = 0
    while i < len(text):
        char = text[i]
        if in_string:
            out.append(char)
            if char == '\\' and i + 1 < len(text):
                out.append(text[i + 1])
                i += 1
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
            out.append(char)
        elif char == ',':
            rest = text[i + 1:].lstrip()
            if not rest.startswith(('}', ']')):
                out.append(char)
        else:
            out.append(char)
        i += 1
    return ''.join(out)


def _read_json(path: str, descriptor: str) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise ProjectLoadError(descriptor, f"cannot read {path}: {e}") from e
    try:
        data = json.loads(strip_json_comments(text)) if text.strip() else {}
    except json.JSONDecodeError as e:
        raise ProjectLoadError(descriptor, f"invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ProjectLoadError(descriptor, f"{path} must contain a JSON object")
    return data


def _resolve_extends(base: str, config_dir: str, descriptor: str) -> str:
    if not (base.startswith('./') or base.startswith('../') or os.path.isabs(base)):
        raise ProjectLoadError(descriptor, f"unsupported extends target {base!r}")
    path = os.path.normpath(os.path.join(config_dir, base))
    if not os.path.isfile(path) and not path.endswith('.json'):
        path += '.json'
    if not os.path.isfile(path):
        raise ProjectLoadError(descriptor, f"extended config {base!r} not found")
    return path


def read_config(config_path: str, descriptor: Optional[str] = None,
                _seen: Optional[Set[str]] = None) -> Dict[str, Any]:
    """
    Read a tsconfig and everything it extends.

    Paths in ``files``/``include``/``exclude`` and in path-valued compiler
    options are made absolute against the config that declares them.

    Raises:
        ProjectNotFound: if the top-level descriptor does not exist
        ProjectLoadError: for malformed JSON or a bad/circular extends chain
    """
    descriptor = descriptor or config_path
    config_path = os.path.abspath(config_path)
    if _seen is None:
        if not os.path.isfile(config_path):
            raise ProjectNotFound(descriptor)
        _seen = set()
    if config_path in _seen:
        raise ProjectLoadError(descriptor, f"circular extends through {config_path}")
    _seen.add(config_path)

    raw = _read_json(config_path, descriptor)
    config_dir = os.path.dirname(config_path)

    merged: Dict[str, Any] = {'compilerOptions': {}}
    extends = raw.get('extends')
    if extends is not None:
        bases = [extends] if isinstance(extends, str) else extends
        if not isinstance(bases, list) or not all(isinstance(b, str) for b in bases):
            raise ProjectLoadError(descriptor, "extends must be a string or a list of strings")
        for base in bases:
            base_config = read_config(_resolve_extends(base, config_dir, descriptor), descriptor, _seen)
            merged['compilerOptions'].update(base_config.get('compilerOptions', {}))
            for key in ('files', 'include', 'exclude'):
                if key in base_config:
                    merged[key] = base_config[key]

    options = raw.get('compilerOptions', {})
    if not isinstance(options, dict):
        raise ProjectLoadError(descriptor, "compilerOptions must be an object")
    for name, value in options.items():
        if name in PATH_OPTIONS and isinstance(value, str):
            value = os.path.normpath(os.path.join(config_dir, value))
        merged['compilerOptions'][name] = value

    for key in ('files', 'include', 'exclude'):
        if key not in raw:
            continue
        entries = raw[key]
        if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
            raise ProjectLoadError(descriptor, f"{key} must be a list of strings")
        merged[key] = [os.path.normpath(os.path.join(config_dir, e)) for e in entries]

    _seen.discard(config_path)
    return merged


def _wildcard_regex(pattern: str, prefix_match: bool = False) -> Pattern[str]:
    parts = pattern.replace(os.sep, '/').split('/')
    regex = ''
    for i, part in enumerate(parts):
        last = i == len(parts) - 1
        if part == '**':
            regex += '.*' if last else '(?:[^/]+/)*'
            continue
        for char in part:
            if char == '*':
                regex += '[^/]*'
            elif char == '?':
                regex += '[^/]'
            else:
                regex += re.escape(char)
        if not last:
            regex += '/'
    if prefix_match:
        regex += '(?:/.*)?'
    return re.compile(regex + '$')


def _has_wildcard(pattern: str) -> bool:
    return '*' in pattern or '?' in pattern


def _literal_prefix(pattern: str) -> str:
    parts = pattern.replace(os.sep, '/').split('/')
    literal = []
    for part in parts:
        if _has_wildcard(part):
            break
        literal.append(part)
    return '/'.join(literal) or '/'


def supported_extensions(compiler_options: Dict[str, Any],
                         extra_file_extensions: Sequence[str] = ()) -> List[str]:
    """Extensions that make a file part of a program."""
    extensions = list(TS_EXTENSIONS)
    if compiler_options.get('allowJs'):
        extensions.extend(JS_EXTENSIONS)
    extensions.extend(e for e in extra_file_extensions if e not in extensions)
    return extensions


def _walk_files(root: str) -> List[str]:
    if os.path.isfile(root):
        return [root]
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith('.') and d not in SKIP_DIRS)
        for name in sorted(filenames):
            if not name.startswith('.'):
                found.append(os.path.join(dirpath, name))
    return found


def expand_file_names(config: Dict[str, Any], config_path: str,
                      extra_file_extensions: Sequence[str] = (),
                      descriptor: Optional[str] = None) -> List[str]:
    """
    Compute the root file list of a read config.

    Raises:
        ProjectLoadError: when a ``files`` entry does not exist
    """
    descriptor = descriptor or config_path
    config_dir = os.path.dirname(os.path.abspath(config_path))
    compiler_options = config.get('compilerOptions', {})
    extensions = supported_extensions(compiler_options, extra_file_extensions)

    result: List[str] = []
    seen: Set[str] = set()

    for path in config.get('files', []):
        if not os.path.isfile(path):
            raise ProjectLoadError(descriptor, f"file {path!r} listed in 'files' not found")
        if path not in seen:
            seen.add(path)
            result.append(path)

    if 'include' in config:
        include = config['include']
    elif 'files' in config:
        include = []
    else:
        include = [os.path.join(config_dir, p) for p in DEFAULT_INCLUDE]

    if 'exclude' in config:
        exclude = list(config['exclude'])
    else:
        exclude = [os.path.join(config_dir, p) for p in DEFAULT_EXCLUDE]
        out_dir = compiler_options.get('outDir')
        if out_dir:
            exclude.append(out_dir)

    include_patterns = []
    for pattern in include:
        if not _has_wildcard(pattern) and not os.path.isfile(pattern) \
                and not os.path.splitext(os.path.basename(pattern))[1]:
            pattern = pattern.rstrip('/') + '/**/*'
        include_patterns.append(pattern)
    include_regexes = [_wildcard_regex(p) for p in include_patterns]
    exclude_regexes = [_wildcard_regex(p, prefix_match=True) for p in exclude]

    roots = sorted({_literal_prefix(p) for p in include_patterns})
    for root in roots:
        for path in _walk_files(root):
            if path in seen:
                continue
            if not any(path.endswith(ext) for ext in extensions):
                continue
            if not any(r.match(path) for r in include_regexes):
                continue
            if any(r.match(path) for r in exclude_regexes):
                continue
            seen.add(path)
            result.append(path)

    if not result:
        logger.debug(f"No inputs were found in config file {config_path}")
    return result


def parse_config(config_path: str, extra_file_extensions: Sequence[str] = ()) -> ParsedConfig:
    """Read a descriptor and expand its root files."""
    config_path = os.path.abspath(config_path)
    config = read_config(config_path)
    file_names = expand_file_names(config, config_path, extra_file_extensions)
    return ParsedConfig(
        config_file_path=config_path,
        compiler_options=config.get('compilerOptions', {}),
        file_names=file_names,
    )
