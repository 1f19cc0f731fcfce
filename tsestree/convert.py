"""
Tree conversion from tree-sitter TypeScript trees to ESTree-shaped trees.

The converter walks the native tree depth-first in child order. Dispatch is a
closed table from native kind to converter method; kinds missing from the
table are either rejected (errorOnUnknownASTType) or passed through as a
``TS<Kind>`` node whose fields follow the native field names.

Every standardized node is registered in the correspondence maps before its
children are converted, so a nested conversion can look up what its native
ancestors became (JSX name context, JSX attribute strings).

Native nodes that never get an entry because they fold into their parent:
parenthesized expressions and types, formal_parameters, arguments, plain
parameters, else/finally clauses, switch bodies, import/export clauses,
template substitutions, nested union/intersection types, ambient
declarations, the index signature and annotation inside a mapped type and
the annotation and rest pattern of a named tuple member. Standardized nodes
that share a native node with the node representing it (not representative,
so excluded from the round trip):
shorthand property keys and values, unaliased import/export specifier
names, default import locals, template elements, method function values,
for-in/of declaration wrappers, default-value patterns of parameter
properties and shorthand properties, self-closing opening elements, empty JSX
expressions, qualified type names, type names built from a bare type
identifier, the type annotation wrapping a function type return or an index
signature parameter, and the member under a rest tuple member.
"""

import html
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import tree_sitter

from .compiler import DIAGNOSTIC_INVALID_ESCAPE, SourceFile, create_diagnostic
from .errors import ParseError, UnknownNodeType
from .node_maps import AstMaps
from .node_utils import native_location, parse_number, span_location, unescape_string
from .types import AST_NODE_TYPES as T, Node

logger = logging.getLogger(__name__)

NativeNode = tree_sitter.Node

LOGICAL_OPERATORS = frozenset(['&&', '||', '??'])

PREDEFINED_TYPES = {
    'any': T.TSAnyKeyword,
    'bigint': T.TSBigIntKeyword,
    'boolean': T.TSBooleanKeyword,
    'never': T.TSNeverKeyword,
    'number': T.TSNumberKeyword,
    'object': T.TSObjectKeyword,
    'string': T.TSStringKeyword,
    'symbol': T.TSSymbolKeyword,
    'undefined': T.TSUndefinedKeyword,
    'unknown': T.TSUnknownKeyword,
    'void': T.TSVoidKeyword,
}

# Standardized parents under which identifiers are JSX names
JSX_NAME_CONTEXT = frozenset([
    T.JSXOpeningElement.value, T.JSXClosingElement.value, T.JSXAttribute.value,
    T.JSXMemberExpression.value, T.JSXNamespacedName.value, T.JSXElement.value,
])

# Mapped type annotation kinds -> the optional modifier they carry
_MAPPED_OPTIONAL = {
    'type_annotation': None,
    'opting_type_annotation': True,
    'adding_type_annotation': '+',
    'omitting_type_annotation': '-',
}

# Pass-through field names that would shadow node metadata
_RESERVED_FIELDS = {'type': 'typeAnnotation', 'range': 'rangeNode', 'loc': 'locNode'}


def _camel(kind: str, upper: bool = True) -> str:
    parts = [p for p in kind.split('_') if p]
    if not parts:
        return kind
    head = parts[0].capitalize() if upper else parts[0]
    return head + ''.join(p.capitalize() for p in parts[1:])


def _named(native: Optional[NativeNode]) -> List[NativeNode]:
    if native is None:
        return []
    return [c for c in native.named_children if c.type != 'comment']


def _first_named(native: Optional[NativeNode]) -> Optional[NativeNode]:
    for child in _named(native):
        return child
    return None


def _has_token(native: NativeNode, token: str) -> bool:
    return any(not c.is_named and c.type == token for c in native.children)


def _find_token(native: NativeNode, token: str) -> Optional[NativeNode]:
    return next((c for c in native.children if not c.is_named and c.type == token), None)


def _find_child(native: NativeNode, kind: str) -> Optional[NativeNode]:
    return next((c for c in native.named_children if c.type == kind), None)


class Converter:
    """Converts one SourceFile's native tree into a standardized tree."""

    def __init__(self, source_file: SourceFile, config: Any, maps: Optional[AstMaps] = None):
        self.source_file = source_file
        self.config = config
        self.maps = maps if maps is not None else AstMaps()

    # ---- core -------------------------------------------------------------

    def convert_program(self) -> Node:
        return self.converter(self.source_file.root_node, None)

    def converter(self, native: Optional[NativeNode], parent: Optional[NativeNode]) -> Optional[Node]:
        """Convert one native node (None passes through)."""
        if native is None:
            return None
        method = _CONVERTERS.get(native.type)
        if method is None:
            return self._convert_unknown(native, parent)
        return method(self, native, parent)

    def convert_list(self, natives: List[NativeNode], parent: Optional[NativeNode]) -> List[Node]:
        result = []
        for native in natives:
            converted = self.converter(native, parent)
            if converted is not None:
                result.append(converted)
        return result

    def create_node(self, native: NativeNode, type: str,
                    span: Optional[Tuple[int, int]] = None) -> Node:
        """
        Create a node for a native node and register it.

        ``span`` overrides the native extent for nodes that cover only part
        of their native node (template elements, synthesized wrappers).
        """
        result = Node(type)
        if span is None:
            if self.config.range:
                result.range = (native.start_byte, native.end_byte)
            if self.config.loc:
                result.loc = native_location(native)
        else:
            if self.config.range:
                result.range = span
            if self.config.loc:
                result.loc = span_location(self.source_file, span[0], span[1])
        self.maps.register(native, result)
        return result

    def text(self, native: NativeNode) -> str:
        return self.source_file.get_text(native)

    def _parent_type(self, parent: Optional[NativeNode]) -> Optional[str]:
        if parent is None:
            return None
        standard = self.maps.native_to_standard.get(parent)
        return standard.type if standard is not None else None

    def _in_jsx_name(self, parent: Optional[NativeNode]) -> bool:
        return self._parent_type(parent) in JSX_NAME_CONTEXT

    def _operator(self, native: NativeNode) -> str:
        operator = native.child_by_field_name('operator')
        if operator is not None:
            return self.text(operator)
        for child in native.children:
            if not child.is_named:
                return child.type
        return ''

    def _convert_unknown(self, native: NativeNode, parent: Optional[NativeNode]) -> Node:
        if self.config.error_on_unknown_ast_type:
            raise UnknownNodeType(native.type, self.source_file.file_name, native.start_byte)

        logger.debug(f"No converter for native kind {native.type}, passing it through")
        result = self.create_node(native, 'TS' + _camel(native.type))
        values: Dict[str, Any] = {}
        cursor = native.walk()
        if cursor.goto_first_child():
            while True:
                child = cursor.node
                if child.is_named and child.type != 'comment':
                    converted = self.converter(child, native)
                    field_name = cursor.field_name
                    if field_name is None:
                        values.setdefault('children', []).append(converted)
                    else:
                        name = _camel(field_name, upper=False)
                        name = _RESERVED_FIELDS.get(name, name)
                        if name in values:
                            if not isinstance(values[name], list):
                                values[name] = [values[name]]
                            values[name].append(converted)
                        else:
                            values[name] = converted
                if not cursor.goto_next_sibling():
                    break
        for name, value in values.items():
            setattr(result, name, value)
        return result

    # ---- names and literals -----------------------------------------------

    def _convert_identifier(self, native, parent):
        node_type = T.JSXIdentifier if self._in_jsx_name(parent) else T.Identifier
        result = self.create_node(native, node_type)
        result.name = self.text(native)
        return result

    def _convert_private_identifier(self, native, parent):
        result = self.create_node(native, T.PrivateIdentifier)
        result.name = self.text(native).lstrip('#')
        return result

    def _synthesized_identifier(self, native: NativeNode) -> Node:
        result = self.create_node(native, T.Identifier)
        result.name = self.text(native)
        return result

    def _convert_name(self, native: Optional[NativeNode], parent: Optional[NativeNode]) -> Optional[Node]:
        """Declaration names: always plain identifiers, whatever the native kind."""
        if native is None:
            return None
        if native.type in ('string', 'number', 'nested_identifier', 'member_expression',
                           'computed_property_name'):
            return self.converter(native, parent)
        if native.type == 'private_property_identifier':
            return self._convert_private_identifier(native, parent)
        return self._synthesized_identifier(native)

    def _convert_entity_name(self, native: Optional[NativeNode], parent: Optional[NativeNode]) -> Optional[Node]:
        """Type names: identifiers or qualified names (A.B.C)."""
        if native is None:
            return None
        if native.type in ('nested_type_identifier', 'nested_identifier', 'member_expression'):
            return self._qualified_name(native)
        return self._synthesized_identifier(native)

    def _qualified_name(self, native: NativeNode) -> Node:
        result = self.create_node(native, T.TSQualifiedName)
        named = _named(native)
        left = native.child_by_field_name('module') or native.child_by_field_name('object') or named[0]
        right = native.child_by_field_name('name') or native.child_by_field_name('property') or named[-1]
        result.left = self._convert_entity_name(left, native)
        result.right = self._synthesized_identifier(right)
        return result

    def _convert_property_key(self, key: NativeNode, parent: NativeNode) -> Tuple[Optional[Node], bool]:
        if key is not None and key.type == 'computed_property_name':
            return self.converter(_first_named(key), parent), True
        return self._convert_name(key, parent), False

    def _convert_number(self, native, parent):
        raw = self.text(native)
        result = self.create_node(native, T.Literal)
        value, bigint = parse_number(raw)
        result.value = value
        result.raw = raw
        if bigint is not None:
            result.bigint = bigint
        return result

    def _convert_string(self, native, parent):
        raw = self.text(native)
        result = self.create_node(native, T.Literal)
        if self._parent_type(parent) == T.JSXAttribute:
            # JSX attribute strings have no escape sequences
            result.value = raw[1:-1]
        else:
            result.value = self._unescape(native, raw[1:-1])
        result.raw = raw
        return result

    def _unescape(self, native: NativeNode, raw: str) -> str:
        try:
            return unescape_string(raw)
        except ValueError as e:
            diagnostic = create_diagnostic(self.source_file, native, DIAGNOSTIC_INVALID_ESCAPE, str(e))
            raise ParseError(diagnostic) from e

    def _convert_regex(self, native, parent):
        result = self.create_node(native, T.Literal)
        pattern = native.child_by_field_name('pattern')
        flags = native.child_by_field_name('flags')
        result.value = None
        result.raw = self.text(native)
        result.regex = {
            'pattern': self.text(pattern) if pattern is not None else '',
            'flags': self.text(flags) if flags is not None else '',
        }
        return result

    def _convert_boolean(self, native, parent):
        result = self.create_node(native, T.Literal)
        result.value = native.type == 'true'
        result.raw = self.text(native)
        return result

    def _convert_null(self, native, parent):
        result = self.create_node(native, T.Literal)
        result.value = None
        result.raw = 'null'
        return result

    def _convert_undefined(self, native, parent):
        result = self.create_node(native, T.Identifier)
        result.name = 'undefined'
        return result

    def _convert_this(self, native, parent):
        return self.create_node(native, T.ThisExpression)

    def _convert_super(self, native, parent):
        return self.create_node(native, T.Super)

    def _convert_template_string(self, native, parent):
        result = self.create_node(native, T.TemplateLiteral)
        result.quasis = []
        result.expressions = []
        tagged = parent is not None and parent.type == 'call_expression'
        chunk_start = native.start_byte
        for child in native.children:
            if child.type != 'template_substitution':
                continue
            result.quasis.append(
                self._template_element(native, chunk_start, child.start_byte + 2, False, tagged))
            result.expressions.append(self.converter(_first_named(child), child))
            chunk_start = child.end_byte - 1
        result.quasis.append(self._template_element(native, chunk_start, native.end_byte, True, tagged))
        return result

    def _template_element(self, native: NativeNode, start: int, end: int, tail: bool,
                          tagged: bool) -> Node:
        # chunks open with '`' or '}' and close with '${' or '`'
        element = self.create_node(native, T.TemplateElement, span=(start, end))
        raw = self.source_file.slice(start + 1, end - (1 if tail else 2))
        if tagged:
            # tagged templates allow invalid escapes; the cooked value is then null
            try:
                cooked = unescape_string(raw)
            except ValueError:
                cooked = None
        else:
            cooked = self._unescape(native, raw)
        element.value = {'raw': raw, 'cooked': cooked}
        element.tail = tail
        return element

    def _convert_meta_property(self, native, parent):
        result = self.create_node(native, T.MetaProperty)
        children = [c for c in native.children if c.type != '.' and c.type != 'comment']
        result.meta = self._synthesized_identifier(children[0])
        result.property = self._synthesized_identifier(children[-1])
        return result

    # ---- program and statements -------------------------------------------

    def _convert_program(self, native, parent):
        result = self.create_node(native, T.Program)
        statements = [c for c in _named(native) if c.type != 'hash_bang_line']
        result.body = self.convert_list(statements, native)
        is_module = any(c.type in ('import_statement', 'export_statement') for c in statements)
        result.sourceType = 'module' if is_module else 'script'
        return result

    def _convert_expression_statement(self, native, parent):
        inner = _first_named(native)
        if inner is not None and inner.type == 'internal_module':
            # namespaces parse as expressions
            return self.converter(inner, parent)
        result = self.create_node(native, T.ExpressionStatement)
        result.expression = self.converter(inner, native)
        return result

    def _convert_variable_declaration(self, native, parent):
        result = self.create_node(native, T.VariableDeclaration)
        declarators = [c for c in _named(native) if c.type == 'variable_declarator']
        result.declarations = self.convert_list(declarators, native)
        kind = native.child_by_field_name('kind')
        result.kind = self.text(kind) if kind is not None else self.text(native.children[0])
        result.declare = False
        return result

    def _convert_variable_declarator(self, native, parent):
        result = self.create_node(native, T.VariableDeclarator)
        result.id = self.converter(native.child_by_field_name('name'), native)
        type_node = native.child_by_field_name('type')
        if type_node is not None and result.id is not None:
            result.id.typeAnnotation = self.converter(type_node, native)
        result.init = self.converter(native.child_by_field_name('value'), native)
        result.definite = _has_token(native, '!')
        return result

    def _convert_statement_block(self, native, parent):
        result = self.create_node(native, T.BlockStatement)
        result.body = self.convert_list(_named(native), native)
        return result

    def _convert_return_statement(self, native, parent):
        result = self.create_node(native, T.ReturnStatement)
        result.argument = self.converter(_first_named(native), native)
        return result

    def _convert_throw_statement(self, native, parent):
        result = self.create_node(native, T.ThrowStatement)
        result.argument = self.converter(_first_named(native), native)
        return result

    def _convert_if_statement(self, native, parent):
        result = self.create_node(native, T.IfStatement)
        result.test = self.converter(native.child_by_field_name('condition'), native)
        result.consequent = self.converter(native.child_by_field_name('consequence'), native)
        alternative = native.child_by_field_name('alternative')
        result.alternate = self.converter(_first_named(alternative), native)
        return result

    def _for_clause(self, clause: Optional[NativeNode], parent: NativeNode) -> Optional[Node]:
        if clause is None or clause.type == 'empty_statement':
            return None
        if clause.type == 'expression_statement':
            return self.converter(_first_named(clause), parent)
        return self.converter(clause, parent)

    def _convert_for_statement(self, native, parent):
        result = self.create_node(native, T.ForStatement)
        result.init = self._for_clause(native.child_by_field_name('initializer'), native)
        result.test = self._for_clause(native.child_by_field_name('condition'), native)
        result.update = self.converter(native.child_by_field_name('increment'), native)
        result.body = self.converter(native.child_by_field_name('body'), native)
        return result

    def _convert_for_in_statement(self, native, parent):
        is_of = _has_token(native, 'of')
        result = self.create_node(native, T.ForOfStatement if is_of else T.ForInStatement)
        left = native.child_by_field_name('left')
        kind = native.child_by_field_name('kind')
        if kind is None:
            kind = next((c for c in native.children
                         if not c.is_named and c.type in ('var', 'let', 'const')), None)
        if kind is not None and left is not None:
            declaration = self.create_node(native, T.VariableDeclaration, span=(kind.start_byte, left.end_byte))
            declarator = self.create_node(native, T.VariableDeclarator, span=(left.start_byte, left.end_byte))
            declaration.declarations = [declarator]
            declaration.kind = self.text(kind)
            declaration.declare = False
            declarator.id = self.converter(left, native)
            declarator.init = None
            declarator.definite = False
            result.left = declaration
        else:
            result.left = self.converter(left, native)
        result.right = self.converter(native.child_by_field_name('right'), native)
        result.body = self.converter(native.child_by_field_name('body'), native)
        if is_of:
            setattr(result, 'await', _has_token(native, 'await'))
        return result

    def _convert_while_statement(self, native, parent):
        result = self.create_node(native, T.WhileStatement)
        result.test = self.converter(native.child_by_field_name('condition'), native)
        result.body = self.converter(native.child_by_field_name('body'), native)
        return result

    def _convert_do_statement(self, native, parent):
        result = self.create_node(native, T.DoWhileStatement)
        result.body = self.converter(native.child_by_field_name('body'), native)
        result.test = self.converter(native.child_by_field_name('condition'), native)
        return result

    def _convert_break_statement(self, native, parent):
        node_type = T.BreakStatement if native.type == 'break_statement' else T.ContinueStatement
        result = self.create_node(native, node_type)
        result.label = self._convert_name(native.child_by_field_name('label') or _first_named(native), native)
        return result

    def _convert_labeled_statement(self, native, parent):
        result = self.create_node(native, T.LabeledStatement)
        result.label = self._convert_name(native.child_by_field_name('label'), native)
        result.body = self.converter(native.child_by_field_name('body'), native)
        return result

    def _convert_empty_statement(self, native, parent):
        return self.create_node(native, T.EmptyStatement)

    def _convert_debugger_statement(self, native, parent):
        return self.create_node(native, T.DebuggerStatement)

    def _convert_try_statement(self, native, parent):
        result = self.create_node(native, T.TryStatement)
        result.block = self.converter(native.child_by_field_name('body'), native)
        result.handler = self.converter(native.child_by_field_name('handler'), native)
        finalizer = native.child_by_field_name('finalizer')
        result.finalizer = self.converter(
            finalizer.child_by_field_name('body') if finalizer is not None else None, native)
        return result

    def _convert_catch_clause(self, native, parent):
        result = self.create_node(native, T.CatchClause)
        result.param = self.converter(native.child_by_field_name('parameter'), native)
        type_node = native.child_by_field_name('type')
        if type_node is not None and result.param is not None:
            result.param.typeAnnotation = self.converter(type_node, native)
        result.body = self.converter(native.child_by_field_name('body'), native)
        return result

    def _convert_switch_statement(self, native, parent):
        result = self.create_node(native, T.SwitchStatement)
        result.discriminant = self.converter(native.child_by_field_name('value'), native)
        result.cases = self.convert_list(_named(native.child_by_field_name('body')), native)
        return result

    def _convert_switch_case(self, native, parent):
        result = self.create_node(native, T.SwitchCase)
        value = native.child_by_field_name('value')
        result.test = self.converter(value, native)
        consequent = [c for c in _named(native) if value is None or c.id != value.id]
        result.consequent = self.convert_list(consequent, native)
        return result

    # ---- expressions ------------------------------------------------------

    def _convert_parenthesized_expression(self, native, parent):
        inner = next((c for c in _named(native) if c.type != 'type_annotation'), None)
        return self.converter(inner, parent)

    def _convert_binary_expression(self, native, parent):
        operator = self._operator(native)
        node_type = T.LogicalExpression if operator in LOGICAL_OPERATORS else T.BinaryExpression
        result = self.create_node(native, node_type)
        result.operator = operator
        result.left = self.converter(native.child_by_field_name('left'), native)
        result.right = self.converter(native.child_by_field_name('right'), native)
        return result

    def _convert_assignment_expression(self, native, parent):
        result = self.create_node(native, T.AssignmentExpression)
        result.operator = self._operator(native)
        result.left = self.converter(native.child_by_field_name('left'), native)
        result.right = self.converter(native.child_by_field_name('right'), native)
        return result

    def _convert_unary_expression(self, native, parent):
        result = self.create_node(native, T.UnaryExpression)
        result.operator = self._operator(native)
        result.prefix = True
        result.argument = self.converter(native.child_by_field_name('argument'), native)
        return result

    def _convert_update_expression(self, native, parent):
        result = self.create_node(native, T.UpdateExpression)
        argument = native.child_by_field_name('argument')
        operator = native.child_by_field_name('operator')
        result.operator = self._operator(native)
        result.prefix = operator is not None and argument is not None \
            and operator.start_byte < argument.start_byte
        result.argument = self.converter(argument, native)
        return result

    def _convert_ternary_expression(self, native, parent):
        result = self.create_node(native, T.ConditionalExpression)
        result.test = self.converter(native.child_by_field_name('condition'), native)
        result.consequent = self.converter(native.child_by_field_name('consequence'), native)
        result.alternate = self.converter(native.child_by_field_name('alternative'), native)
        return result

    def _convert_await_expression(self, native, parent):
        result = self.create_node(native, T.AwaitExpression)
        result.argument = self.converter(_first_named(native), native)
        return result

    def _convert_yield_expression(self, native, parent):
        result = self.create_node(native, T.YieldExpression)
        result.argument = self.converter(_first_named(native), native)
        result.delegate = _has_token(native, '*')
        return result

    def _convert_spread_element(self, native, parent):
        result = self.create_node(native, T.SpreadElement)
        result.argument = self.converter(_first_named(native), native)
        return result

    def _convert_rest_pattern(self, native, parent):
        result = self.create_node(native, T.RestElement)
        result.argument = self.converter(_first_named(native), native)
        return result

    def _flatten(self, native: NativeNode, kind: str) -> List[NativeNode]:
        flat = []
        for child in _named(native):
            if child.type == kind:
                flat.extend(self._flatten(child, kind))
            else:
                flat.append(child)
        return flat

    def _convert_sequence_expression(self, native, parent):
        result = self.create_node(native, T.SequenceExpression)
        result.expressions = self.convert_list(self._flatten(native, 'sequence_expression'), native)
        return result

    def _convert_member_expression(self, native, parent):
        object_node = native.child_by_field_name('object')
        property_node = native.child_by_field_name('property')
        if self._in_jsx_name(parent):
            result = self.create_node(native, T.JSXMemberExpression)
            result.object = self.converter(object_node, native)
            result.property = self.converter(property_node, native)
            return result
        result = self.create_node(native, T.MemberExpression)
        result.object = self.converter(object_node, native)
        result.property = self.converter(property_node, native)
        result.computed = False
        result.optional = native.child_by_field_name('optional_chain') is not None
        return result

    def _convert_subscript_expression(self, native, parent):
        result = self.create_node(native, T.MemberExpression)
        result.object = self.converter(native.child_by_field_name('object'), native)
        result.property = self.converter(native.child_by_field_name('index'), native)
        result.computed = True
        result.optional = native.child_by_field_name('optional_chain') is not None
        return result

    def _convert_arguments(self, arguments: Optional[NativeNode], parent: NativeNode) -> List[Node]:
        return self.convert_list(_named(arguments), parent)

    def _convert_call_expression(self, native, parent):
        function = native.child_by_field_name('function')
        arguments = native.child_by_field_name('arguments')

        if function is not None and function.type == 'import':
            result = self.create_node(native, T.ImportExpression)
            result.source = self.converter(_first_named(arguments), native)
            return result

        if arguments is not None and arguments.type == 'template_string':
            result = self.create_node(native, T.TaggedTemplateExpression)
            result.tag = self.converter(function, native)
            result.typeParameters = self.converter(native.child_by_field_name('type_arguments'), native)
            result.quasi = self.converter(arguments, native)
            return result

        result = self.create_node(native, T.CallExpression)
        result.callee = self.converter(function, native)
        result.typeParameters = self.converter(native.child_by_field_name('type_arguments'), native)
        result.arguments = self._convert_arguments(arguments, native)
        result.optional = native.child_by_field_name('optional_chain') is not None
        return result

    def _convert_new_expression(self, native, parent):
        result = self.create_node(native, T.NewExpression)
        result.callee = self.converter(native.child_by_field_name('constructor'), native)
        result.typeParameters = self.converter(native.child_by_field_name('type_arguments'), native)
        result.arguments = self._convert_arguments(native.child_by_field_name('arguments'), native)
        return result

    # ---- functions --------------------------------------------------------

    def _convert_parameters(self, parameters: Optional[NativeNode], parent: NativeNode) -> List[Node]:
        return self.convert_list(_named(parameters), parent)

    def _fill_function(self, result: Node, native: NativeNode) -> None:
        result.generator = _has_token(native, '*')
        result.expression = False
        setattr(result, 'async', _has_token(native, 'async'))
        result.typeParameters = self.converter(native.child_by_field_name('type_parameters'), native)
        result.params = self._convert_parameters(native.child_by_field_name('parameters'), native)
        result.returnType = self.converter(native.child_by_field_name('return_type'), native)

    def _convert_function(self, native, parent):
        is_declaration = native.type in ('function_declaration', 'generator_function_declaration')
        result = self.create_node(native, T.FunctionDeclaration if is_declaration else T.FunctionExpression)
        result.id = self._convert_name(native.child_by_field_name('name'), native)
        self._fill_function(result, native)
        result.body = self.converter(native.child_by_field_name('body'), native)
        return result

    def _convert_function_signature(self, native, parent):
        result = self.create_node(native, T.TSDeclareFunction)
        result.id = self._convert_name(native.child_by_field_name('name'), native)
        self._fill_function(result, native)
        result.body = None
        result.declare = False
        return result

    def _convert_arrow_function(self, native, parent):
        result = self.create_node(native, T.ArrowFunctionExpression)
        result.id = None
        result.generator = False
        setattr(result, 'async', _has_token(native, 'async'))
        result.typeParameters = self.converter(native.child_by_field_name('type_parameters'), native)
        parameter = native.child_by_field_name('parameter')
        if parameter is not None:
            result.params = [self.converter(parameter, native)]
        else:
            result.params = self._convert_parameters(native.child_by_field_name('parameters'), native)
        result.returnType = self.converter(native.child_by_field_name('return_type'), native)
        body = native.child_by_field_name('body')
        result.body = self.converter(body, native)
        result.expression = body is not None and body.type != 'statement_block'
        return result

    def _convert_parameter(self, native, parent):
        pattern = native.child_by_field_name('pattern')
        type_node = native.child_by_field_name('type')
        value = native.child_by_field_name('value')
        optional = native.type == 'optional_parameter'
        accessibility = _find_child(native, 'accessibility_modifier')
        override = _find_child(native, 'override_modifier') is not None
        readonly = _has_token(native, 'readonly')

        if accessibility is not None or readonly or override:
            result = self.create_node(native, T.TSParameterProperty)
            result.accessibility = self.text(accessibility) if accessibility is not None else None
            result.readonly = readonly
            result.static = False
            result.override = override
            result.parameter = self._parameter_body(native, pattern, type_node, value, optional)
            return result
        return self._parameter_body(native, pattern, type_node, value, optional)

    def _parameter_body(self, native: NativeNode, pattern: Optional[NativeNode],
                        type_node: Optional[NativeNode], value: Optional[NativeNode],
                        optional: bool) -> Optional[Node]:
        if value is None:
            return self._annotated_pattern(native, pattern, type_node, optional)
        result = self.create_node(native, T.AssignmentPattern)
        result.left = self._annotated_pattern(native, pattern, type_node, optional)
        result.right = self.converter(value, native)
        return result

    def _annotated_pattern(self, native: NativeNode, pattern: Optional[NativeNode],
                           type_node: Optional[NativeNode], optional: bool) -> Optional[Node]:
        result = self.converter(pattern, native)
        if result is None:
            return None
        if optional:
            result.optional = True
        if type_node is not None:
            result.typeAnnotation = self.converter(type_node, native)
        return result

    # ---- objects, arrays and patterns -------------------------------------

    def _convert_object(self, native, parent):
        node_type = T.ObjectPattern if native.type == 'object_pattern' else T.ObjectExpression
        result = self.create_node(native, node_type)
        result.properties = self.convert_list(_named(native), native)
        return result

    def _convert_pair(self, native, parent):
        result = self.create_node(native, T.Property)
        result.key, computed = self._convert_property_key(native.child_by_field_name('key'), native)
        result.value = self.converter(native.child_by_field_name('value'), native)
        result.computed = computed
        result.method = False
        result.shorthand = False
        result.kind = 'init'
        return result

    def _convert_shorthand_property(self, native, parent):
        result = self.create_node(native, T.Property)
        result.key = self._synthesized_identifier(native)
        result.value = self._synthesized_identifier(native)
        result.computed = False
        result.method = False
        result.shorthand = True
        result.kind = 'init'
        return result

    def _convert_object_assignment_pattern(self, native, parent):
        left = native.child_by_field_name('left')
        right = native.child_by_field_name('right')
        if left is None or left.type != 'shorthand_property_identifier_pattern':
            return self._convert_assignment_pattern(native, parent)
        result = self.create_node(native, T.Property)
        result.key = self._synthesized_identifier(left)
        value = self.create_node(native, T.AssignmentPattern)
        value.left = self._synthesized_identifier(left)
        value.right = self.converter(right, native)
        result.value = value
        result.computed = False
        result.method = False
        result.shorthand = True
        result.kind = 'init'
        return result

    def _convert_assignment_pattern(self, native, parent):
        result = self.create_node(native, T.AssignmentPattern)
        result.left = self.converter(native.child_by_field_name('left'), native)
        result.right = self.converter(native.child_by_field_name('right'), native)
        return result

    def _convert_elements(self, native: NativeNode) -> List[Optional[Node]]:
        # tree-sitter drops holes; recover them from consecutive commas
        elements: List[Optional[Node]] = []
        expecting = True
        for child in native.children:
            if child.type == ',':
                if expecting:
                    elements.append(None)
                expecting = True
            elif child.is_named and child.type != 'comment':
                elements.append(self.converter(child, native))
                expecting = False
        return elements

    def _convert_array(self, native, parent):
        node_type = T.ArrayPattern if native.type == 'array_pattern' else T.ArrayExpression
        result = self.create_node(native, node_type)
        result.elements = self._convert_elements(native)
        return result

    # ---- classes ----------------------------------------------------------

    def _convert_decorators(self, native: NativeNode) -> List[Node]:
        return self.convert_list([c for c in native.named_children if c.type == 'decorator'], native)

    def _convert_decorator(self, native, parent):
        result = self.create_node(native, T.Decorator)
        result.expression = self.converter(_first_named(native), native)
        return result

    def _convert_class(self, native, parent):
        node_type = T.ClassExpression if native.type == 'class' else T.ClassDeclaration
        result = self.create_node(native, node_type)
        result.decorators = self._convert_decorators(native)
        result.id = self._convert_name(native.child_by_field_name('name'), native)
        result.typeParameters = self.converter(native.child_by_field_name('type_parameters'), native)
        result.superClass = None
        result.superTypeParameters = None
        result.implements = []
        heritage = _find_child(native, 'class_heritage')
        if heritage is not None:
            self._fill_heritage(result, heritage)
        result.body = self.converter(native.child_by_field_name('body'), native)
        result.abstract = native.type == 'abstract_class_declaration'
        result.declare = False
        return result

    def _fill_heritage(self, result: Node, heritage: NativeNode) -> None:
        for clause in _named(heritage):
            if clause.type == 'extends_clause':
                value = clause.child_by_field_name('value') or _first_named(clause)
                result.superClass = self.converter(value, clause)
                result.superTypeParameters = self.converter(clause.child_by_field_name('type_arguments'), clause)
            elif clause.type == 'implements_clause':
                result.implements = [self._convert_heritage(t, T.TSClassImplements) for t in _named(clause)]
            else:
                result.superClass = self.converter(clause, heritage)

    def _convert_heritage(self, native: NativeNode, node_type: str) -> Node:
        result = self.create_node(native, node_type)
        if native.type == 'generic_type':
            result.expression = self._convert_entity_name(native.child_by_field_name('name'), native)
            result.typeParameters = self.converter(native.child_by_field_name('type_arguments'), native)
        else:
            result.expression = self._convert_entity_name(native, native)
            result.typeParameters = None
        return result

    def _convert_class_body(self, native, parent):
        result = self.create_node(native, T.ClassBody)
        members = [c for c in _named(native) if c.type != 'decorator']
        result.body = self.convert_list(members, native)
        return result

    def _method_kind(self, native: NativeNode, key: Optional[Node], is_static: bool) -> str:
        if _has_token(native, 'get'):
            return 'get'
        if _has_token(native, 'set'):
            return 'set'
        if not is_static and key is not None and getattr(key, 'name', None) == 'constructor':
            return 'constructor'
        return 'method'

    def _method_function(self, native: NativeNode) -> Node:
        # the function value spans from its parameter list to the body
        start_node = native.child_by_field_name('type_parameters') or native.child_by_field_name('parameters')
        start = start_node.start_byte if start_node is not None else native.start_byte
        result = self.create_node(native, T.FunctionExpression, span=(start, native.end_byte))
        result.id = None
        self._fill_function(result, native)
        result.body = self.converter(native.child_by_field_name('body'), native)
        return result

    def _convert_method_definition(self, native, parent):
        name = native.child_by_field_name('name')
        is_static = _has_token(native, 'static')
        if parent is not None and parent.type == 'object':
            result = self.create_node(native, T.Property)
            result.key, computed = self._convert_property_key(name, native)
            result.value = self._method_function(native)
            kind = self._method_kind(native, result.key, True)
            result.computed = computed
            result.method = kind == 'method'
            result.shorthand = False
            result.kind = 'init' if kind == 'method' else kind
            return result

        result = self.create_node(native, T.MethodDefinition)
        result.decorators = self._convert_decorators(native)
        result.key, computed = self._convert_property_key(name, native)
        result.value = self._method_function(native)
        result.computed = computed
        result.static = is_static
        result.kind = self._method_kind(native, result.key, is_static)
        accessibility = _find_child(native, 'accessibility_modifier')
        result.accessibility = self.text(accessibility) if accessibility is not None else None
        result.optional = _has_token(native, '?')
        result.override = _find_child(native, 'override_modifier') is not None
        return result

    def _convert_field_definition(self, native, parent):
        result = self.create_node(native, T.PropertyDefinition)
        result.decorators = self._convert_decorators(native)
        name = native.child_by_field_name('name') or native.child_by_field_name('property')
        result.key, computed = self._convert_property_key(name, native)
        result.typeAnnotation = self.converter(native.child_by_field_name('type'), native)
        result.value = self.converter(native.child_by_field_name('value'), native)
        result.computed = computed
        result.static = _has_token(native, 'static')
        result.readonly = _has_token(native, 'readonly')
        result.declare = _has_token(native, 'declare')
        result.optional = _has_token(native, '?')
        result.definite = _has_token(native, '!')
        accessibility = _find_child(native, 'accessibility_modifier')
        result.accessibility = self.text(accessibility) if accessibility is not None else None
        return result

    def _convert_class_static_block(self, native, parent):
        result = self.create_node(native, T.StaticBlock)
        result.body = self.convert_list(_named(native.child_by_field_name('body')), native)
        return result

    # ---- modules ----------------------------------------------------------

    def _convert_import_statement(self, native, parent):
        require_clause = _find_child(native, 'import_require_clause')
        if require_clause is not None:
            return self._convert_import_equals(native, require_clause)

        result = self.create_node(native, T.ImportDeclaration)
        clause = _find_child(native, 'import_clause')
        result.specifiers = self._convert_import_clause(clause) if clause is not None else []
        result.source = self.converter(native.child_by_field_name('source'), native)
        result.importKind = 'type' if _has_token(native, 'type') else 'value'
        return result

    def _convert_import_equals(self, native: NativeNode, clause: NativeNode) -> Node:
        result = self.create_node(native, T.TSImportEqualsDeclaration)
        result.id = self._convert_name(_find_child(clause, 'identifier'), clause)
        reference = self.create_node(clause, T.TSExternalModuleReference)
        source = clause.child_by_field_name('source') or _find_child(clause, 'string')
        reference.expression = self.converter(source, clause)
        result.moduleReference = reference
        result.importKind = 'type' if _has_token(native, 'type') else 'value'
        result.isExport = False
        return result

    def _convert_import_clause(self, clause: NativeNode) -> List[Node]:
        specifiers = []
        for child in _named(clause):
            if child.type == 'identifier':
                specifier = self.create_node(child, T.ImportDefaultSpecifier)
                specifier.local = self._synthesized_identifier(child)
                specifiers.append(specifier)
            elif child.type == 'namespace_import':
                specifier = self.create_node(child, T.ImportNamespaceSpecifier)
                specifier.local = self._convert_name(_find_child(child, 'identifier'), child)
                specifiers.append(specifier)
            elif child.type == 'named_imports':
                specifiers.extend(self.convert_list(
                    [s for s in _named(child) if s.type == 'import_specifier'], clause))
        return specifiers

    def _convert_import_specifier(self, native, parent):
        result = self.create_node(native, T.ImportSpecifier)
        name = native.child_by_field_name('name')
        alias = native.child_by_field_name('alias')
        result.imported = self._convert_name(name, native)
        result.local = self._convert_name(alias, native) if alias is not None \
            else self._synthesized_identifier(name)
        result.importKind = 'type' if _has_token(native, 'type') else 'value'
        return result

    def _convert_export_statement(self, native, parent):
        declaration = native.child_by_field_name('declaration')
        source = native.child_by_field_name('source')

        if _has_token(native, 'default'):
            result = self.create_node(native, T.ExportDefaultDeclaration)
            value = declaration or native.child_by_field_name('value') or \
                next((c for c in _named(native) if c.type != 'decorator'), None)
            result.declaration = self.converter(value, native)
            result.exportKind = 'value'
            return result

        if _has_token(native, '='):
            result = self.create_node(native, T.TSExportAssignment)
            result.expression = self.converter(_first_named(native), native)
            return result

        if declaration is not None:
            result = self.create_node(native, T.ExportNamedDeclaration)
            result.declaration = self.converter(declaration, native)
            result.specifiers = []
            result.source = None
            is_type = declaration.type in ('interface_declaration', 'type_alias_declaration')
            result.exportKind = 'type' if is_type else 'value'
            return result

        namespace = _find_child(native, 'namespace_export')
        if namespace is not None or _has_token(native, '*'):
            result = self.create_node(native, T.ExportAllDeclaration)
            result.exported = self._convert_name(_first_named(namespace), namespace) \
                if namespace is not None else None
            result.source = self.converter(source, native)
            result.exportKind = 'type' if _has_token(native, 'type') else 'value'
            return result

        clause = _find_child(native, 'export_clause')
        if clause is None:
            return self._convert_unknown(native, parent)

        result = self.create_node(native, T.ExportNamedDeclaration)
        result.declaration = None
        result.specifiers = self.convert_list(
            [s for s in _named(clause) if s.type == 'export_specifier'], native)
        result.source = self.converter(source, native)
        result.exportKind = 'type' if _has_token(native, 'type') else 'value'
        return result

    def _convert_export_specifier(self, native, parent):
        result = self.create_node(native, T.ExportSpecifier)
        name = native.child_by_field_name('name')
        alias = native.child_by_field_name('alias')
        result.local = self._convert_name(name, native)
        result.exported = self._convert_name(alias, native) if alias is not None \
            else self._synthesized_identifier(name)
        result.exportKind = 'type' if _has_token(native, 'type') else 'value'
        return result

    # ---- JSX --------------------------------------------------------------

    def _convert_jsx_element(self, native, parent):
        opening = _find_child(native, 'jsx_opening_element')
        closing = _find_child(native, 'jsx_closing_element')
        children = [c for c in _named(native) if c.type not in ('jsx_opening_element', 'jsx_closing_element')]

        if opening is not None and opening.child_by_field_name('name') is None:
            result = self.create_node(native, T.JSXFragment)
            result.openingFragment = self.create_node(opening, T.JSXOpeningFragment)
            result.children = self.convert_list(children, native)
            result.closingFragment = self.create_node(closing, T.JSXClosingFragment) \
                if closing is not None else None
            return result

        result = self.create_node(native, T.JSXElement)
        result.openingElement = self.converter(opening, native)
        result.children = self.convert_list(children, native)
        result.closingElement = self.converter(closing, native)
        return result

    def _fill_opening_element(self, result: Node, native: NativeNode, self_closing: bool) -> None:
        name = native.child_by_field_name('name')
        type_arguments = native.child_by_field_name('type_arguments')
        skip = {n.id for n in (name, type_arguments) if n is not None}
        result.name = self.converter(name, native)
        result.typeParameters = self.converter(type_arguments, native)
        result.attributes = self.convert_list([c for c in _named(native) if c.id not in skip], native)
        result.selfClosing = self_closing

    def _convert_jsx_opening_element(self, native, parent):
        result = self.create_node(native, T.JSXOpeningElement)
        self._fill_opening_element(result, native, False)
        return result

    def _convert_jsx_self_closing_element(self, native, parent):
        result = self.create_node(native, T.JSXElement)
        opening = self.create_node(native, T.JSXOpeningElement)
        result.openingElement = opening
        self._fill_opening_element(opening, native, True)
        result.children = []
        result.closingElement = None
        return result

    def _convert_jsx_closing_element(self, native, parent):
        result = self.create_node(native, T.JSXClosingElement)
        result.name = self.converter(native.child_by_field_name('name') or _first_named(native), native)
        return result

    def _convert_jsx_attribute(self, native, parent):
        result = self.create_node(native, T.JSXAttribute)
        named = _named(native)
        result.name = self.converter(named[0], native) if named else None
        result.value = self.converter(named[1], native) if len(named) > 1 else None
        return result

    def _convert_jsx_namespace_name(self, native, parent):
        result = self.create_node(native, T.JSXNamespacedName)
        named = _named(native)
        result.namespace = self.converter(named[0], native)
        result.name = self.converter(named[-1], native)
        return result

    def _convert_nested_identifier(self, native, parent):
        if not self._in_jsx_name(parent):
            return self._qualified_name(native)
        result = self.create_node(native, T.JSXMemberExpression)
        named = _named(native)
        result.object = self.converter(named[0], native)
        result.property = self.converter(named[-1], native)
        return result

    def _convert_jsx_expression(self, native, parent):
        inner = _first_named(native)
        if inner is not None and inner.type == 'spread_element':
            if parent is not None and parent.type in ('jsx_opening_element', 'jsx_self_closing_element'):
                result = self.create_node(native, T.JSXSpreadAttribute)
                result.argument = self.converter(_first_named(inner), native)
            else:
                result = self.create_node(native, T.JSXSpreadChild)
                result.expression = self.converter(_first_named(inner), native)
            return result

        result = self.create_node(native, T.JSXExpressionContainer)
        if inner is None:
            result.expression = self.create_node(
                native, T.JSXEmptyExpression, span=(native.start_byte + 1, native.end_byte - 1))
        else:
            result.expression = self.converter(inner, native)
        return result

    def _convert_jsx_text(self, native, parent):
        node_type = T.JSXText if self.config.use_jsx_text_node else T.Literal
        result = self.create_node(native, node_type)
        raw = self.text(native)
        result.value = html.unescape(raw)
        result.raw = raw
        return result

    # ---- TypeScript -------------------------------------------------------

    def _convert_type_annotation(self, native, parent):
        result = self.create_node(native, T.TSTypeAnnotation)
        result.typeAnnotation = self.converter(_first_named(native), native)
        return result

    def _convert_predefined_type(self, native, parent):
        node_type = PREDEFINED_TYPES.get(self.text(native))
        if node_type is None:
            return self._convert_unknown(native, parent)
        return self.create_node(native, node_type)

    def _convert_type_identifier(self, native, parent):
        result = self.create_node(native, T.TSTypeReference)
        result.typeName = self._synthesized_identifier(native)
        result.typeParameters = None
        return result

    def _convert_nested_type_identifier(self, native, parent):
        result = self.create_node(native, T.TSTypeReference)
        result.typeName = self._qualified_name(native)
        result.typeParameters = None
        return result

    def _convert_generic_type(self, native, parent):
        result = self.create_node(native, T.TSTypeReference)
        result.typeName = self._convert_entity_name(native.child_by_field_name('name'), native)
        result.typeParameters = self.converter(native.child_by_field_name('type_arguments'), native)
        return result

    def _convert_type_arguments(self, native, parent):
        result = self.create_node(native, T.TSTypeParameterInstantiation)
        result.params = self.convert_list(_named(native), native)
        return result

    def _convert_type_parameters(self, native, parent):
        result = self.create_node(native, T.TSTypeParameterDeclaration)
        result.params = self.convert_list(_named(native), native)
        return result

    def _convert_type_parameter(self, native, parent):
        result = self.create_node(native, T.TSTypeParameter)
        result.name = self._convert_name(native.child_by_field_name('name'), native)
        result.constraint = self.converter(_first_named(native.child_by_field_name('constraint')), native)
        result.default = self.converter(_first_named(native.child_by_field_name('value')), native)
        return result

    def _convert_union_type(self, native, parent):
        node_type = T.TSUnionType if native.type == 'union_type' else T.TSIntersectionType
        result = self.create_node(native, node_type)
        result.types = self.convert_list(self._flatten(native, native.type), native)
        return result

    def _convert_array_type(self, native, parent):
        result = self.create_node(native, T.TSArrayType)
        result.elementType = self.converter(_first_named(native), native)
        return result

    def _convert_literal_type(self, native, parent):
        inner = _first_named(native)
        if inner is not None and inner.type == 'null':
            return self.create_node(native, T.TSNullKeyword)
        if inner is not None and inner.type == 'undefined':
            return self.create_node(native, T.TSUndefinedKeyword)
        result = self.create_node(native, T.TSLiteralType)
        result.literal = self.converter(inner, native)
        return result

    def _convert_parenthesized_type(self, native, parent):
        return self.converter(_first_named(native), parent)

    def _convert_object_type(self, native, parent):
        members = _named(native)
        if len(members) == 1 and members[0].type == 'index_signature' \
                and _find_child(members[0], 'mapped_type_clause') is not None:
            return self._mapped_type(native, members[0])
        result = self.create_node(native, T.TSTypeLiteral)
        result.members = self.convert_list(members, native)
        return result

    def _mapped_type(self, native: NativeNode, signature: NativeNode) -> Node:
        # { readonly [K in T as N]?: V } arrives as an object type holding one index signature
        result = self.create_node(native, T.TSMappedType)
        clause = _find_child(signature, 'mapped_type_clause')
        parameter = self.create_node(clause, T.TSTypeParameter)
        parameter.name = self._synthesized_identifier(clause.child_by_field_name('name'))
        parameter.constraint = self.converter(clause.child_by_field_name('type'), clause)
        parameter.default = None
        result.typeParameter = parameter
        result.nameType = self.converter(clause.child_by_field_name('alias'), clause)

        annotation = signature.child_by_field_name('type')
        result.typeAnnotation = self.converter(_first_named(annotation), native)
        result.optional = _MAPPED_OPTIONAL.get(annotation.type) if annotation is not None else None
        if _has_token(signature, 'readonly'):
            sign = signature.child_by_field_name('sign')
            result.readonly = self.text(sign) if sign is not None else True
        else:
            result.readonly = None
        return result

    def _bare_annotation(self, native: NativeNode, type_native: Optional[NativeNode],
                         token: str) -> Optional[Node]:
        """
        Wrap a type that has no type_annotation node of its own.

        The wrapper spans from ``token`` to the end of the type and is
        registered after the type, so the type stays representative.
        """
        if type_native is None:
            return None
        inner = self.converter(type_native, native)
        target = type_native
        while target.type == 'parenthesized_type' and _first_named(target) is not None:
            target = _first_named(target)
        start = _find_token(native, token)
        span = (start.start_byte if start is not None else type_native.start_byte, type_native.end_byte)
        annotation = self.create_node(target, T.TSTypeAnnotation, span=span)
        annotation.typeAnnotation = inner
        return annotation

    def _convert_function_type(self, native, parent):
        node_type = T.TSFunctionType if native.type == 'function_type' else T.TSConstructorType
        result = self.create_node(native, node_type)
        if node_type == T.TSConstructorType:
            result.abstract = _has_token(native, 'abstract')
        result.typeParameters = self.converter(native.child_by_field_name('type_parameters'), native)
        result.params = self._convert_parameters(native.child_by_field_name('parameters'), native)
        return_type = native.child_by_field_name('return_type') or native.child_by_field_name('type')
        result.returnType = self._bare_annotation(native, return_type, '=>')
        return result

    def _convert_conditional_type(self, native, parent):
        result = self.create_node(native, T.TSConditionalType)
        result.checkType = self.converter(native.child_by_field_name('left'), native)
        result.extendsType = self.converter(native.child_by_field_name('right'), native)
        result.trueType = self.converter(native.child_by_field_name('consequence'), native)
        result.falseType = self.converter(native.child_by_field_name('alternative'), native)
        return result

    def _convert_infer_type(self, native, parent):
        result = self.create_node(native, T.TSInferType)
        named = _named(native)
        parameter = self.create_node(named[0], T.TSTypeParameter)
        parameter.name = self._synthesized_identifier(named[0])
        parameter.constraint = self.converter(named[1], native) if len(named) > 1 else None
        parameter.default = None
        result.typeParameter = parameter
        return result

    def _convert_tuple_type(self, native, parent):
        result = self.create_node(native, T.TSTupleType)
        result.elementTypes = self.convert_list(_named(native), native)
        return result

    def _convert_tuple_parameter(self, native, parent):
        name = native.child_by_field_name('name') or _first_named(native)
        annotation = native.child_by_field_name('type') or _find_child(native, 'type_annotation')
        if name.type == 'rest_pattern':
            result = self.create_node(native, T.TSRestType)
            member = self.create_node(native, T.TSNamedTupleMember)
            result.typeAnnotation = member
            name = _first_named(name)
        else:
            result = member = self.create_node(native, T.TSNamedTupleMember)
        member.label = self._synthesized_identifier(name)
        member.elementType = self.converter(_first_named(annotation), native)
        member.optional = native.type == 'optional_tuple_parameter'
        return result

    def _convert_wrapped_type(self, native, parent):
        # T? inside tuples, ...T inside tuples
        node_type = T.TSOptionalType if native.type == 'optional_type' else T.TSRestType
        result = self.create_node(native, node_type)
        result.typeAnnotation = self.converter(_first_named(native), native)
        return result

    def _convert_type_operator(self, native, parent):
        result = self.create_node(native, T.TSTypeOperator)
        result.operator = 'keyof' if native.type == 'index_type_query' else 'readonly'
        result.typeAnnotation = self.converter(_first_named(native), native)
        return result

    def _convert_lookup_type(self, native, parent):
        result = self.create_node(native, T.TSIndexedAccessType)
        named = _named(native)
        result.objectType = self.converter(named[0], native)
        result.indexType = self.converter(named[1] if len(named) > 1 else None, native)
        return result

    def _convert_type_query(self, native, parent):
        result = self.create_node(native, T.TSTypeQuery)
        inner = _first_named(native)
        if inner is not None and inner.type in ('identifier', 'member_expression', 'nested_identifier'):
            result.exprName = self._convert_entity_name(inner, native)
        else:
            result.exprName = self.converter(inner, native)
        result.typeArguments = None
        return result

    def _convert_index_signature(self, native, parent):
        result = self.create_node(native, T.TSIndexSignature)
        name = native.child_by_field_name('name')
        result.parameters = []
        if name is not None:
            parameter = self._synthesized_identifier(name)
            parameter.typeAnnotation = self._bare_annotation(
                native, native.child_by_field_name('index_type'), ':')
            result.parameters.append(parameter)
        result.typeAnnotation = self.converter(native.child_by_field_name('type'), native)
        result.readonly = _has_token(native, 'readonly')
        result.static = _has_token(native, 'static')
        return result

    def _convert_property_signature(self, native, parent):
        result = self.create_node(native, T.TSPropertySignature)
        result.key, computed = self._convert_property_key(native.child_by_field_name('name'), native)
        result.computed = computed
        result.optional = _has_token(native, '?')
        result.readonly = _has_token(native, 'readonly')
        result.static = _has_token(native, 'static')
        result.typeAnnotation = self.converter(native.child_by_field_name('type'), native)
        return result

    def _convert_method_signature(self, native, parent):
        result = self.create_node(native, T.TSMethodSignature)
        result.key, computed = self._convert_property_key(native.child_by_field_name('name'), native)
        result.computed = computed
        result.optional = _has_token(native, '?')
        result.kind = self._method_kind(native, None, True)
        result.typeParameters = self.converter(native.child_by_field_name('type_parameters'), native)
        result.params = self._convert_parameters(native.child_by_field_name('parameters'), native)
        result.returnType = self.converter(native.child_by_field_name('return_type'), native)
        return result

    def _convert_interface_declaration(self, native, parent):
        result = self.create_node(native, T.TSInterfaceDeclaration)
        result.id = self._convert_name(native.child_by_field_name('name'), native)
        result.typeParameters = self.converter(native.child_by_field_name('type_parameters'), native)
        extends = _find_child(native, 'extends_type_clause')
        result.extends = [self._convert_heritage(t, T.TSInterfaceHeritage) for t in _named(extends)]
        body = native.child_by_field_name('body')
        result.body = self._convert_interface_body(body, native) if body is not None else None
        result.declare = False
        return result

    def _convert_interface_body(self, native, parent):
        result = self.create_node(native, T.TSInterfaceBody)
        result.body = self.convert_list(_named(native), native)
        return result

    def _convert_type_alias_declaration(self, native, parent):
        result = self.create_node(native, T.TSTypeAliasDeclaration)
        result.id = self._convert_name(native.child_by_field_name('name'), native)
        result.typeParameters = self.converter(native.child_by_field_name('type_parameters'), native)
        result.typeAnnotation = self.converter(native.child_by_field_name('value'), native)
        result.declare = False
        return result

    def _convert_as_expression(self, native, parent):
        node_type = T.TSAsExpression if native.type == 'as_expression' else T.TSSatisfiesExpression
        result = self.create_node(native, node_type)
        named = _named(native)
        result.expression = self.converter(named[0] if named else None, native)
        if len(named) > 1:
            result.typeAnnotation = self.converter(named[1], native)
        else:
            const = _find_token(native, 'const')
            reference = self.create_node(const, T.TSTypeReference) if const is not None else None
            if reference is not None:
                reference.typeName = self._synthesized_identifier(const)
                reference.typeParameters = None
            result.typeAnnotation = reference
        return result

    def _convert_non_null_expression(self, native, parent):
        result = self.create_node(native, T.TSNonNullExpression)
        result.expression = self.converter(_first_named(native), native)
        return result

    def _convert_type_assertion(self, native, parent):
        result = self.create_node(native, T.TSTypeAssertion)
        named = _named(native)
        type_arguments = named[0] if named else None
        result.typeAnnotation = self.converter(_first_named(type_arguments), native)
        result.expression = self.converter(named[1] if len(named) > 1 else None, native)
        return result

    def _convert_enum_declaration(self, native, parent):
        result = self.create_node(native, T.TSEnumDeclaration)
        result.id = self._convert_name(native.child_by_field_name('name'), native)
        body = native.child_by_field_name('body')
        result.members = [self._convert_enum_member(m, body) for m in _named(body)]
        result.const = _has_token(native, 'const')
        result.declare = False
        return result

    def _convert_enum_member(self, native: NativeNode, parent: NativeNode) -> Node:
        result = self.create_node(native, T.TSEnumMember)
        if native.type == 'enum_assignment':
            result.id = self._convert_name(native.child_by_field_name('name'), native)
            result.initializer = self.converter(native.child_by_field_name('value'), native)
        elif native.type == 'string':
            literal = self.create_node(native, T.Literal)
            literal.value = self._unescape(native, self.text(native)[1:-1])
            literal.raw = self.text(native)
            result.id = literal
            result.initializer = None
        else:
            result.id = self._synthesized_identifier(native)
            result.initializer = None
        return result

    def _convert_module(self, native, parent):
        result = self.create_node(native, T.TSModuleDeclaration)
        result.id = self._convert_name(native.child_by_field_name('name'), native)
        body = native.child_by_field_name('body')
        result.body = self._convert_module_block(body) if body is not None else None
        result.kind = 'namespace' if native.type == 'internal_module' else 'module'
        result.declare = False
        setattr(result, 'global', False)
        return result

    def _convert_module_block(self, block: NativeNode) -> Node:
        result = self.create_node(block, T.TSModuleBlock)
        result.body = self.convert_list(_named(block), block)
        return result

    def _convert_ambient_declaration(self, native, parent):
        global_token = _find_token(native, 'global')
        if global_token is not None:
            result = self.create_node(native, T.TSModuleDeclaration)
            result.id = self._synthesized_identifier(global_token)
            block = _find_child(native, 'statement_block')
            result.body = self._convert_module_block(block) if block is not None else None
            result.kind = 'global'
            result.declare = True
            setattr(result, 'global', True)
            return result

        inner = _first_named(native)
        if inner is None:
            return self._convert_unknown(native, parent)
        result = self.converter(inner, parent)
        if result is not None:
            result.declare = True
        return result


_CONVERTERS: Dict[str, Callable[[Converter, NativeNode, Optional[NativeNode]], Optional[Node]]] = {
    # names and literals
    'identifier': Converter._convert_identifier,
    'property_identifier': Converter._convert_identifier,
    'statement_identifier': Converter._convert_identifier,
    'private_property_identifier': Converter._convert_private_identifier,
    'number': Converter._convert_number,
    'string': Converter._convert_string,
    'regex': Converter._convert_regex,
    'true': Converter._convert_boolean,
    'false': Converter._convert_boolean,
    'null': Converter._convert_null,
    'undefined': Converter._convert_undefined,
    'this': Converter._convert_this,
    'super': Converter._convert_super,
    'template_string': Converter._convert_template_string,
    'meta_property': Converter._convert_meta_property,
    # statements
    'program': Converter._convert_program,
    'expression_statement': Converter._convert_expression_statement,
    'variable_declaration': Converter._convert_variable_declaration,
    'lexical_declaration': Converter._convert_variable_declaration,
    'variable_declarator': Converter._convert_variable_declarator,
    'statement_block': Converter._convert_statement_block,
    'return_statement': Converter._convert_return_statement,
    'throw_statement': Converter._convert_throw_statement,
    'if_statement': Converter._convert_if_statement,
    'for_statement': Converter._convert_for_statement,
    'for_in_statement': Converter._convert_for_in_statement,
    'while_statement': Converter._convert_while_statement,
    'do_statement': Converter._convert_do_statement,
    'break_statement': Converter._convert_break_statement,
    'continue_statement': Converter._convert_break_statement,
    'labeled_statement': Converter._convert_labeled_statement,
    'empty_statement': Converter._convert_empty_statement,
    'debugger_statement': Converter._convert_debugger_statement,
    'try_statement': Converter._convert_try_statement,
    'catch_clause': Converter._convert_catch_clause,
    'switch_statement': Converter._convert_switch_statement,
    'switch_case': Converter._convert_switch_case,
    'switch_default': Converter._convert_switch_case,
    # expressions
    'parenthesized_expression': Converter._convert_parenthesized_expression,
    'binary_expression': Converter._convert_binary_expression,
    'assignment_expression': Converter._convert_assignment_expression,
    'augmented_assignment_expression': Converter._convert_assignment_expression,
    'unary_expression': Converter._convert_unary_expression,
    'update_expression': Converter._convert_update_expression,
    'ternary_expression': Converter._convert_ternary_expression,
    'await_expression': Converter._convert_await_expression,
    'yield_expression': Converter._convert_yield_expression,
    'spread_element': Converter._convert_spread_element,
    'rest_pattern': Converter._convert_rest_pattern,
    'sequence_expression': Converter._convert_sequence_expression,
    'member_expression': Converter._convert_member_expression,
    'subscript_expression': Converter._convert_subscript_expression,
    'call_expression': Converter._convert_call_expression,
    'new_expression': Converter._convert_new_expression,
    # functions
    'function_declaration': Converter._convert_function,
    'generator_function_declaration': Converter._convert_function,
    'function_expression': Converter._convert_function,
    'function': Converter._convert_function,
    'generator_function': Converter._convert_function,
    'function_signature': Converter._convert_function_signature,
    'arrow_function': Converter._convert_arrow_function,
    'required_parameter': Converter._convert_parameter,
    'optional_parameter': Converter._convert_parameter,
    # objects, arrays and patterns
    'object': Converter._convert_object,
    'object_pattern': Converter._convert_object,
    'pair': Converter._convert_pair,
    'pair_pattern': Converter._convert_pair,
    'shorthand_property_identifier': Converter._convert_shorthand_property,
    'shorthand_property_identifier_pattern': Converter._convert_shorthand_property,
    'object_assignment_pattern': Converter._convert_object_assignment_pattern,
    'assignment_pattern': Converter._convert_assignment_pattern,
    'array': Converter._convert_array,
    'array_pattern': Converter._convert_array,
    # classes
    'class_declaration': Converter._convert_class,
    'abstract_class_declaration': Converter._convert_class,
    'class': Converter._convert_class,
    'class_body': Converter._convert_class_body,
    'method_definition': Converter._convert_method_definition,
    'public_field_definition': Converter._convert_field_definition,
    'field_definition': Converter._convert_field_definition,
    'class_static_block': Converter._convert_class_static_block,
    'decorator': Converter._convert_decorator,
    # modules
    'import_statement': Converter._convert_import_statement,
    'import_specifier': Converter._convert_import_specifier,
    'export_statement': Converter._convert_export_statement,
    'export_specifier': Converter._convert_export_specifier,
    # JSX
    'jsx_element': Converter._convert_jsx_element,
    'jsx_opening_element': Converter._convert_jsx_opening_element,
    'jsx_self_closing_element': Converter._convert_jsx_self_closing_element,
    'jsx_closing_element': Converter._convert_jsx_closing_element,
    'jsx_attribute': Converter._convert_jsx_attribute,
    'jsx_namespace_name': Converter._convert_jsx_namespace_name,
    'nested_identifier': Converter._convert_nested_identifier,
    'jsx_expression': Converter._convert_jsx_expression,
    'jsx_text': Converter._convert_jsx_text,
    'html_character_reference': Converter._convert_jsx_text,
    # TypeScript
    'type_annotation': Converter._convert_type_annotation,
    'predefined_type': Converter._convert_predefined_type,
    'type_identifier': Converter._convert_type_identifier,
    'nested_type_identifier': Converter._convert_nested_type_identifier,
    'generic_type': Converter._convert_generic_type,
    'type_arguments': Converter._convert_type_arguments,
    'type_parameters': Converter._convert_type_parameters,
    'type_parameter': Converter._convert_type_parameter,
    'union_type': Converter._convert_union_type,
    'intersection_type': Converter._convert_union_type,
    'array_type': Converter._convert_array_type,
    'literal_type': Converter._convert_literal_type,
    'parenthesized_type': Converter._convert_parenthesized_type,
    'object_type': Converter._convert_object_type,
    'function_type': Converter._convert_function_type,
    'constructor_type': Converter._convert_function_type,
    'conditional_type': Converter._convert_conditional_type,
    'infer_type': Converter._convert_infer_type,
    'tuple_type': Converter._convert_tuple_type,
    'tuple_parameter': Converter._convert_tuple_parameter,
    'optional_tuple_parameter': Converter._convert_tuple_parameter,
    'optional_type': Converter._convert_wrapped_type,
    'rest_type': Converter._convert_wrapped_type,
    'index_type_query': Converter._convert_type_operator,
    'readonly_type': Converter._convert_type_operator,
    'lookup_type': Converter._convert_lookup_type,
    'type_query': Converter._convert_type_query,
    'index_signature': Converter._convert_index_signature,
    'property_signature': Converter._convert_property_signature,
    'method_signature': Converter._convert_method_signature,
    'interface_declaration': Converter._convert_interface_declaration,
    'interface_body': Converter._convert_interface_body,
    'type_alias_declaration': Converter._convert_type_alias_declaration,
    'as_expression': Converter._convert_as_expression,
    'satisfies_expression': Converter._convert_as_expression,
    'non_null_expression': Converter._convert_non_null_expression,
    'type_assertion': Converter._convert_type_assertion,
    'enum_declaration': Converter._convert_enum_declaration,
    'module': Converter._convert_module,
    'internal_module': Converter._convert_module,
    'ambient_declaration': Converter._convert_ambient_declaration,
}
