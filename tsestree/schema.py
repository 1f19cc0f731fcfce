"""
JSON output contract for standardized trees.

This module turns trees into JSON-ready dicts and validates such dicts
against a JSON schema, so the output stays a well-defined contract for
downstream tools.
"""

from typing import Any, Dict, List

import jsonschema

from .types import AST_TOKEN_TYPES, Comment, Node, SourceLocation, Token

TOKEN_TYPE_NAMES = [t.value for t in AST_TOKEN_TYPES if t not in (AST_TOKEN_TYPES.Block, AST_TOKEN_TYPES.Line)]

_DEFINITIONS = {
    "position": {
        "type": "object",
        "properties": {
            "line": {"type": "integer", "minimum": 1},
            "column": {"type": "integer", "minimum": 0},
        },
        "required": ["line", "column"],
        "additionalProperties": False,
    },
    "location": {
        "type": "object",
        "properties": {
            "start": {"$ref": "#/definitions/position"},
            "end": {"$ref": "#/definitions/position"},
        },
        "required": ["start", "end"],
        "additionalProperties": False,
        "description": "Line/column span (1-based lines, 0-based byte columns)",
    },
    "range": {
        "type": "array",
        "items": {"type": "integer", "minimum": 0},
        "minItems": 2,
        "maxItems": 2,
        "description": "Start and end byte offsets",
    },
    "node": {
        "type": "object",
        "properties": {
            "type": {"type": "string", "minLength": 1},
            "range": {"$ref": "#/definitions/range"},
            "loc": {"$ref": "#/definitions/location"},
        },
        "required": ["type"],
    },
    "token": {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": TOKEN_TYPE_NAMES},
            "value": {"type": "string"},
            "range": {"$ref": "#/definitions/range"},
            "loc": {"$ref": "#/definitions/location"},
        },
        "required": ["type", "value"],
        "additionalProperties": False,
    },
    "comment": {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": ["Line", "Block"]},
            "value": {"type": "string"},
            "range": {"$ref": "#/definitions/range"},
            "loc": {"$ref": "#/definitions/location"},
        },
        "required": ["type", "value"],
        "additionalProperties": False,
    },
}

# JSON Schema for a whole converted file (the Program node)
AST_JSON_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "definitions": _DEFINITIONS,
    "type": "object",
    "properties": {
        "type": {"const": "Program"},
        "body": {"type": "array", "items": {"$ref": "#/definitions/node"}},
        "sourceType": {"type": "string", "enum": ["script", "module"]},
        "range": {"$ref": "#/definitions/range"},
        "loc": {"$ref": "#/definitions/location"},
        "tokens": {"type": "array", "items": {"$ref": "#/definitions/token"}},
        "comments": {"type": "array", "items": {"$ref": "#/definitions/comment"}},
    },
    "required": ["type", "body", "sourceType"],
}

# Every nested node is checked against this one
NODE_JSON_SCHEMA = {"definitions": _DEFINITIONS, "$ref": "#/definitions/node"}


def _location_to_dict(loc: SourceLocation) -> Dict[str, Any]:
    return {
        "start": {"line": loc.start.line, "column": loc.start.column},
        "end": {"line": loc.end.line, "column": loc.end.column},
    }


def _spans(item: Any, data: Dict[str, Any]) -> Dict[str, Any]:
    if item.range is not None:
        data["range"] = list(item.range)
    if item.loc is not None:
        data["loc"] = _location_to_dict(item.loc)
    return data


def _value_to_json(value: Any) -> Any:
    if isinstance(value, Node):
        return node_to_dict(value)
    if isinstance(value, (Token, Comment)):
        return _spans(value, {"type": str(value.type), "value": value.value})
    if isinstance(value, (list, tuple)):
        return [_value_to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: _value_to_json(v) for k, v in value.items()}
    return value


def node_to_dict(node: Node) -> Dict[str, Any]:
    """Convert a node (and its subtree) to a JSON-ready dict."""
    data: Dict[str, Any] = {"type": node.type}
    for name, value in node.iter_fields():
        data[name] = _value_to_json(value)
    return _spans(node, data)


def ast_to_dict(root: Node) -> Dict[str, Any]:
    """Convert a Program node, including tokens and comments when attached."""
    return node_to_dict(root)


def _iter_nested_nodes(value: Any, path: str):
    if isinstance(value, dict):
        if "type" in value and path:
            yield path, value
        for key, item in value.items():
            if key in ("tokens", "comments", "loc"):
                continue
            yield from _iter_nested_nodes(item, f"{path}/{key}")
    elif isinstance(value, list):
        for i, item in enumerate(value):
            yield from _iter_nested_nodes(item, f"{path}/{i}")


def validate_ast(data: Dict[str, Any]) -> List[str]:
    """
    Validate a serialized tree against the JSON schema.

    Args:
        data: Output of ``ast_to_dict``

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []
    validator = jsonschema.Draft7Validator(AST_JSON_SCHEMA)
    for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
        location = "/".join(str(p) for p in error.path) or "<root>"
        errors.append(f"{location}: {error.message}")

    if not isinstance(data, dict):
        return errors

    node_validator = jsonschema.Draft7Validator(NODE_JSON_SCHEMA)
    for path, node in _iter_nested_nodes(data, ""):
        for error in node_validator.iter_errors(node):
            errors.append(f"{path.lstrip('/')}: {error.message}")
    return errors
