"""
Core types for the standardized (ESTree-shaped) tree.

This module provides the node and token vocabularies and the small value
types shared by the converter, the token pass and the output contract.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Literal, Optional, Tuple


# Type aliases for clarity
NodeRange = Tuple[int, int]  # (start_byte, end_byte) 0-based
DebugModule = Literal["typescript-eslint", "eslint", "typescript"]
CommentType = Literal["Line", "Block"]


class AST_NODE_TYPES(str, Enum):
    """Standardized node kinds."""

    ArrayExpression = "ArrayExpression"
    ArrayPattern = "ArrayPattern"
    ArrowFunctionExpression = "ArrowFunctionExpression"
    AssignmentExpression = "AssignmentExpression"
    AssignmentPattern = "AssignmentPattern"
    AwaitExpression = "AwaitExpression"
    BinaryExpression = "BinaryExpression"
    BlockStatement = "BlockStatement"
    BreakStatement = "BreakStatement"
    CallExpression = "CallExpression"
    CatchClause = "CatchClause"
    ClassBody = "ClassBody"
    ClassDeclaration = "ClassDeclaration"
    ClassExpression = "ClassExpression"
    ConditionalExpression = "ConditionalExpression"
    ContinueStatement = "ContinueStatement"
    DebuggerStatement = "DebuggerStatement"
    Decorator = "Decorator"
    DoWhileStatement = "DoWhileStatement"
    EmptyStatement = "EmptyStatement"
    ExportAllDeclaration = "ExportAllDeclaration"
    ExportDefaultDeclaration = "ExportDefaultDeclaration"
    ExportNamedDeclaration = "ExportNamedDeclaration"
    ExportSpecifier = "ExportSpecifier"
    ExpressionStatement = "ExpressionStatement"
    ForInStatement = "ForInStatement"
    ForOfStatement = "ForOfStatement"
    ForStatement = "ForStatement"
    FunctionDeclaration = "FunctionDeclaration"
    FunctionExpression = "FunctionExpression"
    Identifier = "Identifier"
    IfStatement = "IfStatement"
    ImportDeclaration = "ImportDeclaration"
    ImportDefaultSpecifier = "ImportDefaultSpecifier"
    ImportExpression = "ImportExpression"
    ImportNamespaceSpecifier = "ImportNamespaceSpecifier"
    ImportSpecifier = "ImportSpecifier"
    JSXAttribute = "JSXAttribute"
    JSXClosingElement = "JSXClosingElement"
    JSXClosingFragment = "JSXClosingFragment"
    JSXElement = "JSXElement"
    JSXEmptyExpression = "JSXEmptyExpression"
    JSXExpressionContainer = "JSXExpressionContainer"
    JSXFragment = "JSXFragment"
    JSXIdentifier = "JSXIdentifier"
    JSXMemberExpression = "JSXMemberExpression"
    JSXNamespacedName = "JSXNamespacedName"
    JSXOpeningElement = "JSXOpeningElement"
    JSXOpeningFragment = "JSXOpeningFragment"
    JSXSpreadAttribute = "JSXSpreadAttribute"
    JSXSpreadChild = "JSXSpreadChild"
    JSXText = "JSXText"
    LabeledStatement = "LabeledStatement"
    Literal = "Literal"
    LogicalExpression = "LogicalExpression"
    MemberExpression = "MemberExpression"
    MetaProperty = "MetaProperty"
    MethodDefinition = "MethodDefinition"
    NewExpression = "NewExpression"
    ObjectExpression = "ObjectExpression"
    ObjectPattern = "ObjectPattern"
    PrivateIdentifier = "PrivateIdentifier"
    Program = "Program"
    Property = "Property"
    PropertyDefinition = "PropertyDefinition"
    RestElement = "RestElement"
    ReturnStatement = "ReturnStatement"
    SequenceExpression = "SequenceExpression"
    SpreadElement = "SpreadElement"
    StaticBlock = "StaticBlock"
    Super = "Super"
    SwitchCase = "SwitchCase"
    SwitchStatement = "SwitchStatement"
    TaggedTemplateExpression = "TaggedTemplateExpression"
    TemplateElement = "TemplateElement"
    TemplateLiteral = "TemplateLiteral"
    ThisExpression = "ThisExpression"
    ThrowStatement = "ThrowStatement"
    TryStatement = "TryStatement"
    UnaryExpression = "UnaryExpression"
    UpdateExpression = "UpdateExpression"
    VariableDeclaration = "VariableDeclaration"
    VariableDeclarator = "VariableDeclarator"
    WhileStatement = "WhileStatement"
    YieldExpression = "YieldExpression"
    # TypeScript nodes
    TSAnyKeyword = "TSAnyKeyword"
    TSArrayType = "TSArrayType"
    TSAsExpression = "TSAsExpression"
    TSBigIntKeyword = "TSBigIntKeyword"
    TSBooleanKeyword = "TSBooleanKeyword"
    TSClassImplements = "TSClassImplements"
    TSConditionalType = "TSConditionalType"
    TSConstructorType = "TSConstructorType"
    TSDeclareFunction = "TSDeclareFunction"
    TSEnumDeclaration = "TSEnumDeclaration"
    TSEnumMember = "TSEnumMember"
    TSExportAssignment = "TSExportAssignment"
    TSExternalModuleReference = "TSExternalModuleReference"
    TSFunctionType = "TSFunctionType"
    TSImportEqualsDeclaration = "TSImportEqualsDeclaration"
    TSIndexSignature = "TSIndexSignature"
    TSIndexedAccessType = "TSIndexedAccessType"
    TSInferType = "TSInferType"
    TSInterfaceBody = "TSInterfaceBody"
    TSInterfaceDeclaration = "TSInterfaceDeclaration"
    TSInterfaceHeritage = "TSInterfaceHeritage"
    TSIntersectionType = "TSIntersectionType"
    TSLiteralType = "TSLiteralType"
    TSMappedType = "TSMappedType"
    TSMethodSignature = "TSMethodSignature"
    TSModuleBlock = "TSModuleBlock"
    TSModuleDeclaration = "TSModuleDeclaration"
    TSNamedTupleMember = "TSNamedTupleMember"
    TSNeverKeyword = "TSNeverKeyword"
    TSNonNullExpression = "TSNonNullExpression"
    TSNullKeyword = "TSNullKeyword"
    TSNumberKeyword = "TSNumberKeyword"
    TSObjectKeyword = "TSObjectKeyword"
    TSOptionalType = "TSOptionalType"
    TSParameterProperty = "TSParameterProperty"
    TSPropertySignature = "TSPropertySignature"
    TSQualifiedName = "TSQualifiedName"
    TSRestType = "TSRestType"
    TSSatisfiesExpression = "TSSatisfiesExpression"
    TSStringKeyword = "TSStringKeyword"
    TSSymbolKeyword = "TSSymbolKeyword"
    TSTupleType = "TSTupleType"
    TSTypeAliasDeclaration = "TSTypeAliasDeclaration"
    TSTypeAnnotation = "TSTypeAnnotation"
    TSTypeAssertion = "TSTypeAssertion"
    TSTypeLiteral = "TSTypeLiteral"
    TSTypeOperator = "TSTypeOperator"
    TSTypeParameter = "TSTypeParameter"
    TSTypeParameterDeclaration = "TSTypeParameterDeclaration"
    TSTypeParameterInstantiation = "TSTypeParameterInstantiation"
    TSTypeQuery = "TSTypeQuery"
    TSTypeReference = "TSTypeReference"
    TSUndefinedKeyword = "TSUndefinedKeyword"
    TSUnionType = "TSUnionType"
    TSUnknownKeyword = "TSUnknownKeyword"
    TSVoidKeyword = "TSVoidKeyword"

    def __str__(self) -> str:
        return self.value


class AST_TOKEN_TYPES(str, Enum):
    """Token and comment kinds."""

    Boolean = "Boolean"
    Identifier = "Identifier"
    JSXIdentifier = "JSXIdentifier"
    JSXText = "JSXText"
    Keyword = "Keyword"
    Null = "Null"
    Numeric = "Numeric"
    Punctuator = "Punctuator"
    RegularExpression = "RegularExpression"
    String = "String"
    Template = "Template"
    # Comments
    Block = "Block"
    Line = "Line"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Position:
    """A point in the source. Lines are 1-based, columns 0-based byte columns."""
    line: int
    column: int


@dataclass(frozen=True)
class SourceLocation:
    """Start and end positions of a node or token."""
    start: Position
    end: Position


# Attributes every node carries that are not kind-specific fields
_NODE_META = ("type", "range", "loc")


class Node:
    """
    A node of the standardized tree.

    Kind-specific fields are plain attributes (``node.body``, ``node.id``)
    named as in ESTree and kept in the order the converter assigned them.
    Nodes hash and compare by identity, so they can key the
    correspondence maps.
    """

    def __init__(self, type: str, range: Optional[NodeRange] = None,
                 loc: Optional[SourceLocation] = None, **fields: Any):
        self.type = str(type)
        self.range = range
        self.loc = loc
        for name, value in fields.items():
            setattr(self, name, value)

    def iter_fields(self) -> Iterator[Tuple[str, Any]]:
        """Yield (name, value) for every kind-specific field in order."""
        for name, value in vars(self).items():
            if name not in _NODE_META:
                yield name, value

    def iter_children(self) -> Iterator["Node"]:
        """Yield child nodes in field order, flattening list fields."""
        for _, value in self.iter_fields():
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        yield item

    def walk(self) -> Iterator["Node"]:
        """Yield this node and every descendant, depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.iter_children())))

    def __repr__(self) -> str:
        if self.range is not None:
            return f"Node({self.type} {self.range[0]}:{self.range[1]})"
        return f"Node({self.type})"


@dataclass(eq=False)
class Token:
    """A lexical token of the source."""
    type: str
    value: str
    range: Optional[NodeRange] = None
    loc: Optional[SourceLocation] = None


@dataclass(eq=False)
class Comment:
    """A line or block comment, without its delimiters."""
    type: CommentType
    value: str
    range: Optional[NodeRange] = None
    loc: Optional[SourceLocation] = None

