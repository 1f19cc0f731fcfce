"""
Option handling for the parse entry points.

Raw user options are validated with pydantic (camelCase as well as
snake_case keys) and normalized into an immutable NormalizedConfig with
every default resolved. Options may also come from a YAML file.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Literal, Mapping, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidOptions, MissingFilePath
from .settings import configure_debug_logging, get_settings
from .tsconfig import resolve_project_path
from .types import DebugModule

logger = logging.getLogger(__name__)

# Sentinel file names used when no filePath is given
ANONYMOUS_FILE_TS = "estree.ts"
ANONYMOUS_FILE_TSX = "estree.tsx"

OPTIONS_FILE_NAMES = (".tsestree.yml", ".tsestree.yaml", "tsestree.yml", "tsestree.yaml")

LogFn = Callable[[str], Any]


class RawOptions(BaseModel):
    """Options exactly as the caller passed them."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        strict=True,
        arbitrary_types_allowed=True,
    )

    comment: Optional[bool] = None
    create_default_program: Optional[bool] = Field(None, alias="createDefaultProgram")
    debug_level: Optional[Union[bool, List[DebugModule]]] = Field(None, alias="debugLevel")
    error_on_typescript_syntactic_and_semantic_issues: Optional[bool] = Field(
        None, alias="errorOnTypeScriptSyntacticAndSemanticIssues"
    )
    error_on_unknown_ast_type: Optional[bool] = Field(None, alias="errorOnUnknownASTType")
    extra_file_extensions: Optional[List[str]] = Field(None, alias="extraFileExtensions")
    file_path: Optional[str] = Field(None, alias="filePath")
    jsx: Optional[bool] = None
    loc: Optional[bool] = None
    logger_fn: Optional[Union[Literal[False], Callable[..., Any]]] = Field(None, alias="loggerFn")
    preserve_node_maps: Optional[bool] = Field(None, alias="preserveNodeMaps")
    project: Optional[Union[str, List[str]]] = None
    range: Optional[bool] = None
    tokens: Optional[bool] = None
    tsconfig_root_dir: Optional[str] = Field(None, alias="tsconfigRootDir")
    use_jsx_text_node: Optional[bool] = Field(None, alias="useJSXTextNode")

    @field_validator("project")
    @classmethod
    def _check_project(cls, value):
        if value is None:
            return value
        entries = [value] if isinstance(value, str) else value
        if any(not entry.strip() for entry in entries):
            raise ValueError("project entries must be non-empty paths")
        return value

    @field_validator("tsconfig_root_dir", "file_path")
    @classmethod
    def _check_non_empty(cls, value):
        if value is not None and not value.strip():
            raise ValueError("must be a non-empty path")
        return value

    @field_validator("extra_file_extensions")
    @classmethod
    def _check_extensions(cls, value):
        for extension in value or []:
            if not extension.startswith(".") or len(extension) < 2:
                raise ValueError(f"extra file extension {extension!r} must start with '.'")
        return value

    def project_entries(self) -> List[str]:
        if self.project is None:
            return []
        return [self.project] if isinstance(self.project, str) else list(self.project)


@dataclass(frozen=True)
class NormalizedConfig:
    """Fully resolved options for one parse call."""
    code: str
    comment: bool
    create_default_program: bool
    debug_level: FrozenSet[str]
    error_on_typescript_syntactic_and_semantic_issues: bool
    error_on_unknown_ast_type: bool
    extra_file_extensions: Tuple[str, ...]
    file_path: str
    anonymous_file: bool
    jsx: bool
    loc: bool
    log: LogFn
    preserve_node_maps: Optional[bool]
    projects: Tuple[str, ...]
    range: bool
    tokens: bool
    tsconfig_root_dir: str
    use_jsx_text_node: bool


def _silent(message: str) -> None:
    return None


def validate_options(options: Union[None, Mapping[str, Any], RawOptions]) -> RawOptions:
    """
    Validate raw options.

    Raises:
        InvalidOptions: on unknown keys, wrong types or bad values
    """
    if options is None:
        return RawOptions()
    if isinstance(options, RawOptions):
        return options
    if not isinstance(options, Mapping):
        raise InvalidOptions(f"options must be a mapping, got {type(options).__name__}")
    try:
        return RawOptions.model_validate(dict(options))
    except ValidationError as e:
        messages = []
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            messages.append(f"{location}: {error['msg']}")
        raise InvalidOptions("Invalid parser options: " + "; ".join(messages), messages) from e


def normalize_options(code: str, options: Union[None, Mapping[str, Any], RawOptions] = None,
                      *, resolve_projects: bool = True) -> NormalizedConfig:
    """
    Validate options and resolve every default.

    Args:
        code: Source text to be parsed
        options: Raw options (camelCase or snake_case keys)
        resolve_projects: When False, ``project`` is ignored (plain parse)

    Returns:
        NormalizedConfig instance

    Raises:
        InvalidOptions: for bad shapes or values
        MissingFilePath: when projects are requested without a filePath
    """
    if not isinstance(code, str):
        raise InvalidOptions(f"code must be a string, got {type(code).__name__}")
    raw = validate_options(options)

    if raw.tsconfig_root_dir is not None:
        root_dir = os.path.abspath(raw.tsconfig_root_dir)
    else:
        root_dir = os.getcwd()

    jsx = bool(raw.jsx)
    anonymous = raw.file_path is None
    file_name = raw.file_path or (ANONYMOUS_FILE_TSX if jsx else ANONYMOUS_FILE_TS)
    file_path = os.path.abspath(os.path.join(root_dir, file_name))

    projects: Tuple[str, ...] = ()
    if resolve_projects and raw.project_entries():
        if anonymous:
            raise MissingFilePath()
        projects = tuple(resolve_project_path(entry, root_dir) for entry in raw.project_entries())

    debug_modules = set()
    if raw.debug_level is True:
        debug_modules.add("typescript-eslint")
    elif isinstance(raw.debug_level, list):
        debug_modules.update(raw.debug_level)
    debug_modules.update(get_settings().debug_modules)
    debug_level = configure_debug_logging(debug_modules)

    if raw.logger_fn is False:
        log: LogFn = _silent
    elif raw.logger_fn is not None:
        log = raw.logger_fn
    else:
        log = logger.warning

    config = NormalizedConfig(
        code=code,
        comment=bool(raw.comment),
        create_default_program=bool(raw.create_default_program),
        debug_level=debug_level,
        error_on_typescript_syntactic_and_semantic_issues=bool(
            raw.error_on_typescript_syntactic_and_semantic_issues
        ),
        error_on_unknown_ast_type=bool(raw.error_on_unknown_ast_type),
        extra_file_extensions=tuple(raw.extra_file_extensions or ()),
        file_path=file_path,
        anonymous_file=anonymous,
        jsx=jsx,
        loc=bool(raw.loc),
        log=log,
        preserve_node_maps=raw.preserve_node_maps,
        projects=projects,
        range=bool(raw.range),
        tokens=bool(raw.tokens),
        tsconfig_root_dir=root_dir,
        use_jsx_text_node=bool(raw.use_jsx_text_node),
    )
    logger.debug(f"Normalized options for {file_path} (projects: {len(projects)})")
    return config


def load_options_file(path: str) -> Dict[str, Any]:
    """
    Load parser options from a YAML file.

    Relative ``tsconfigRootDir`` values are taken relative to the file.

    Raises:
        InvalidOptions: if the file cannot be read or is not a mapping
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise InvalidOptions(f"Could not load options file {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidOptions(f"Options file {path} must contain a mapping")

    for key in ("tsconfigRootDir", "tsconfig_root_dir"):
        value = data.get(key)
        if isinstance(value, str) and value and not os.path.isabs(value):
            data[key] = os.path.normpath(os.path.join(os.path.dirname(os.path.abspath(path)), value))
    return data


def find_options_file(start_path: str = ".") -> Optional[str]:
    """
    Find an options file by walking up the directory tree.

    Args:
        start_path: Directory (or file) to start searching from

    Returns:
        Path to the options file if found, None otherwise
    """
    current = os.path.abspath(start_path)
    if os.path.isfile(current):
        current = os.path.dirname(current)

    while True:
        for name in OPTIONS_FILE_NAMES:
            candidate = os.path.join(current, name)
            if os.path.isfile(candidate):
                return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent
