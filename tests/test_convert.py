"""
Tests for the tree converter: node kinds, fields and child order.
"""

import pytest

from tsestree import AST_NODE_TYPES, parse
from tsestree.errors import ParseError, TypeScriptDiagnosticError, UnknownNodeType


def statement(code, **options):
    """Convert code and return its first top-level statement."""
    return parse(code, options).body[0]


def expression(code, **options):
    """Convert code and return the expression of its first statement."""
    return statement(code, **options).expression


class TestProgram:
    def test_variable_declaration(self):
        ast = parse("const x = 1;")
        assert ast.type == AST_NODE_TYPES.Program
        assert ast.sourceType == "script"
        declaration = ast.body[0]
        assert declaration.type == "VariableDeclaration"
        assert declaration.kind == "const"
        declarator = declaration.declarations[0]
        assert declarator.id.type == "Identifier"
        assert declarator.id.name == "x"
        assert declarator.init.type == "Literal"
        assert declarator.init.value == 1
        assert declarator.init.raw == "1"

    def test_positions_off_by_default(self):
        ast = parse("const x = 1;")
        assert ast.range is None
        assert ast.loc is None

    def test_program_range(self):
        ast = parse("const x = 1;", {"range": True, "loc": True})
        assert ast.range == (0, 12)
        assert (ast.loc.start.line, ast.loc.start.column) == (1, 0)
        assert (ast.loc.end.line, ast.loc.end.column) == (1, 12)

    def test_module_source_type(self):
        assert parse("export const a = 1;").sourceType == "module"

    def test_child_order_follows_source(self):
        ast = parse("a;\nb;\nc;")
        assert [s.expression.name for s in ast.body] == ["a", "b", "c"]

    def test_type_annotation_on_declarator(self):
        declarator = statement("let y: string;").declarations[0]
        assert declarator.id.typeAnnotation.type == "TSTypeAnnotation"
        assert declarator.id.typeAnnotation.typeAnnotation.type == "TSStringKeyword"
        assert declarator.init is None


class TestExpressions:
    def test_logical_vs_binary(self):
        assert expression("a && b;").type == "LogicalExpression"
        assert expression("a ?? b;").type == "LogicalExpression"
        binary = expression("a + b;")
        assert binary.type == "BinaryExpression"
        assert binary.operator == "+"
        assert binary.left.name == "a"
        assert binary.right.name == "b"

    def test_parentheses_are_folded(self):
        node = expression("(a + b) * c;")
        assert node.type == "BinaryExpression"
        assert node.operator == "*"
        assert node.left.type == "BinaryExpression"

    def test_call_and_member(self):
        call = expression("obj.method(1, x);")
        assert call.type == "CallExpression"
        assert call.callee.type == "MemberExpression"
        assert call.callee.computed is False
        assert call.callee.property.name == "method"
        assert [a.type for a in call.arguments] == ["Literal", "Identifier"]
        assert call.optional is False

    def test_computed_member(self):
        member = expression("a[0];")
        assert member.type == "MemberExpression"
        assert member.computed is True
        assert member.property.value == 0

    def test_assignment_and_update(self):
        assignment = expression("x += 2;")
        assert assignment.type == "AssignmentExpression"
        assert assignment.operator == "+="
        update = expression("i++;")
        assert update.type == "UpdateExpression"
        assert update.prefix is False
        assert expression("--i;").prefix is True

    def test_unary_and_conditional(self):
        unary = expression("typeof x;")
        assert unary.type == "UnaryExpression"
        assert unary.operator == "typeof"
        conditional = expression("a ? b : c;")
        assert conditional.type == "ConditionalExpression"
        assert conditional.alternate.name == "c"

    def test_array_holes(self):
        array = expression("[1, , 2];")
        assert array.type == "ArrayExpression"
        assert [e and e.value for e in array.elements] == [1, None, 2]

    def test_object_properties(self):
        obj = expression("({a, b: 1, [c]: 2, m() {}});")
        assert obj.type == "ObjectExpression"
        shorthand, pair, computed, method = obj.properties
        assert shorthand.shorthand is True
        assert shorthand.key.name == shorthand.value.name == "a"
        assert shorthand.key is not shorthand.value
        assert pair.key.name == "b" and pair.value.value == 1
        assert computed.computed is True
        assert method.method is True
        assert method.value.type == "FunctionExpression"

    def test_template_literal(self):
        template = expression("`a${b}c`;")
        assert template.type == "TemplateLiteral"
        assert [q.value["raw"] for q in template.quasis] == ["a", "c"]
        assert [q.tail for q in template.quasis] == [False, True]
        assert template.expressions[0].name == "b"

    def test_tagged_template(self):
        tagged = expression("tag`x`;")
        assert tagged.type == "TaggedTemplateExpression"
        assert tagged.tag.name == "tag"
        assert tagged.quasi.type == "TemplateLiteral"

    def test_tagged_template_invalid_escape(self):
        tagged = expression(r"tag`\u{110000}`;")
        element = tagged.quasi.quasis[0]
        assert element.value["raw"] == r"\u{110000}"
        assert element.value["cooked"] is None

    def test_literals(self):
        assert expression("'a\\nb';").value == "a\nb"
        assert expression("0x10;").value == 16
        big = expression("10n;")
        assert big.bigint == "10"
        regex = expression("/ab+c/gi;")
        assert regex.regex == {"pattern": "ab+c", "flags": "gi"}
        assert expression("true;").value is True
        assert expression("null;").value is None

    def test_arrow_function(self):
        arrow = expression("async (a: number) => a * 2;")
        assert arrow.type == "ArrowFunctionExpression"
        assert getattr(arrow, "async") is True
        assert arrow.expression is True
        assert arrow.params[0].name == "a"
        assert arrow.params[0].typeAnnotation.typeAnnotation.type == "TSNumberKeyword"

    def test_new_expression(self):
        new = expression("new Map<string, number>();")
        assert new.type == "NewExpression"
        assert new.callee.name == "Map"
        assert len(new.typeParameters.params) == 2

    def test_as_const(self):
        node = statement("const z = [1] as const;").declarations[0].init
        assert node.type == "TSAsExpression"
        assert node.typeAnnotation.type == "TSTypeReference"
        assert node.typeAnnotation.typeName.name == "const"

    def test_non_null(self):
        assert expression("a!;").type == "TSNonNullExpression"


class TestStatements:
    def test_if_else(self):
        node = statement("if (a) { b; } else c;")
        assert node.type == "IfStatement"
        assert node.test.name == "a"
        assert node.consequent.type == "BlockStatement"
        assert node.alternate.type == "ExpressionStatement"

    def test_for_of(self):
        node = statement("for (const x of xs) {}")
        assert node.type == "ForOfStatement"
        assert node.left.type == "VariableDeclaration"
        assert node.left.kind == "const"
        assert node.left.declarations[0].id.name == "x"
        assert node.right.name == "xs"
        assert getattr(node, "await") is False

    def test_for_in_without_declaration(self):
        node = statement("for (k in o) {}")
        assert node.type == "ForInStatement"
        assert node.left.type == "Identifier"

    def test_classic_for(self):
        node = statement("for (let i = 0; i < n; i++) {}")
        assert node.type == "ForStatement"
        assert node.init.type == "VariableDeclaration"
        assert node.test.type == "BinaryExpression"
        assert node.update.type == "UpdateExpression"

    def test_try_catch_finally(self):
        node = statement("try { a(); } catch (e) { b(); } finally { c(); }")
        assert node.type == "TryStatement"
        assert node.handler.type == "CatchClause"
        assert node.handler.param.name == "e"
        assert node.finalizer.type == "BlockStatement"

    def test_switch(self):
        node = statement("switch (x) { case 1: a(); break; default: b(); }")
        assert node.type == "SwitchStatement"
        first, default = node.cases
        assert first.test.value == 1
        assert [s.type for s in first.consequent] == ["ExpressionStatement", "BreakStatement"]
        assert default.test is None

    def test_labeled_break(self):
        node = statement("outer: while (true) { break outer; }")
        assert node.type == "LabeledStatement"
        assert node.label.name == "outer"
        assert node.body.body.body[0].label.name == "outer"


class TestFunctionsAndClasses:
    def test_function_declaration(self):
        node = statement("async function f(a: number, b = 2): void { return a; }")
        assert node.type == "FunctionDeclaration"
        assert node.id.name == "f"
        assert getattr(node, "async") is True
        assert node.generator is False
        first, second = node.params
        assert first.type == "Identifier"
        assert first.typeAnnotation.typeAnnotation.type == "TSNumberKeyword"
        assert second.type == "AssignmentPattern"
        assert second.left.name == "b"
        assert second.right.value == 2
        assert node.returnType.typeAnnotation.type == "TSVoidKeyword"
        assert node.body.body[0].type == "ReturnStatement"

    def test_optional_and_rest_parameters(self):
        node = statement("function g(a?: string, ...rest: number[]) {}")
        optional, rest = node.params
        assert optional.optional is True
        assert rest.type == "RestElement"
        assert rest.typeAnnotation.typeAnnotation.type == "TSArrayType"

    def test_class_declaration(self):
        node = statement(
            "class A extends B implements C {\n"
            "  constructor(private x: string) { super(); }\n"
            "  static m() {}\n"
            "  y = 1;\n"
            "}"
        )
        assert node.type == "ClassDeclaration"
        assert node.id.name == "A"
        assert node.superClass.name == "B"
        assert node.implements[0].type == "TSClassImplements"
        assert node.implements[0].expression.name == "C"
        constructor, method, field = node.body.body
        assert constructor.type == "MethodDefinition"
        assert constructor.kind == "constructor"
        parameter = constructor.value.params[0]
        assert parameter.type == "TSParameterProperty"
        assert parameter.accessibility == "private"
        assert parameter.parameter.name == "x"
        assert method.static is True
        assert method.kind == "method"
        assert field.type == "PropertyDefinition"
        assert field.key.name == "y"
        assert field.value.value == 1

    def test_getter(self):
        node = statement("class A { get v() { return 1; } }")
        assert node.body.body[0].kind == "get"

    def test_class_expression(self):
        node = statement("const K = class {};").declarations[0].init
        assert node.type == "ClassExpression"
        assert node.id is None


class TestModules:
    def test_import_declaration(self):
        node = statement("import d, { a as b, c } from './m';")
        assert node.type == "ImportDeclaration"
        default, aliased, plain = node.specifiers
        assert default.type == "ImportDefaultSpecifier"
        assert default.local.name == "d"
        assert aliased.imported.name == "a"
        assert aliased.local.name == "b"
        assert plain.imported.name == plain.local.name == "c"
        assert node.source.value == "./m"
        assert node.importKind == "value"

    def test_namespace_import(self):
        node = statement("import * as ns from 'lib';")
        assert node.specifiers[0].type == "ImportNamespaceSpecifier"
        assert node.specifiers[0].local.name == "ns"

    def test_type_import(self):
        assert statement("import type { T } from './t';").importKind == "type"

    def test_export_named_declaration(self):
        node = statement("export const y = 2;")
        assert node.type == "ExportNamedDeclaration"
        assert node.declaration.type == "VariableDeclaration"
        assert node.specifiers == []

    def test_export_specifiers(self):
        node = statement("export { a, b as c } from './m';")
        assert node.type == "ExportNamedDeclaration"
        assert [(s.local.name, s.exported.name) for s in node.specifiers] == [("a", "a"), ("b", "c")]
        assert node.source.value == "./m"

    def test_export_default(self):
        node = statement("export default function () {}")
        assert node.type == "ExportDefaultDeclaration"
        assert node.declaration.type in ("FunctionDeclaration", "FunctionExpression")

    def test_export_all(self):
        node = statement("export * from './m';")
        assert node.type == "ExportAllDeclaration"
        assert node.exported is None

    def test_export_namespace(self):
        node = statement("export * as ns from './m';", errorOnUnknownASTType=True)
        assert node.type == "ExportAllDeclaration"
        assert node.exported.type == "Identifier"
        assert node.exported.name == "ns"
        assert node.source.value == "./m"

    def test_dynamic_import(self):
        node = expression("import('./lazy');")
        assert node.type == "ImportExpression"
        assert node.source.value == "./lazy"


class TestTypeScript:
    def test_type_alias_union(self):
        node = statement("type T = string | number[] | null;")
        assert node.type == "TSTypeAliasDeclaration"
        union = node.typeAnnotation
        assert union.type == "TSUnionType"
        assert [t.type for t in union.types] == ["TSStringKeyword", "TSArrayType", "TSNullKeyword"]

    def test_generic_type_reference(self):
        node = statement("let m: Map<string, Foo>;").declarations[0]
        reference = node.id.typeAnnotation.typeAnnotation
        assert reference.type == "TSTypeReference"
        assert reference.typeName.name == "Map"
        assert [p.type for p in reference.typeParameters.params] == ["TSStringKeyword", "TSTypeReference"]

    def test_qualified_type_name(self):
        node = statement("let v: NS.Inner;").declarations[0]
        reference = node.id.typeAnnotation.typeAnnotation
        assert reference.typeName.type == "TSQualifiedName"
        assert reference.typeName.left.name == "NS"
        assert reference.typeName.right.name == "Inner"

    def test_interface(self):
        node = statement("interface I<T> extends J { a?: string; m(x: T): void; }")
        assert node.type == "TSInterfaceDeclaration"
        assert node.id.name == "I"
        assert node.typeParameters.params[0].name.name == "T"
        assert node.extends[0].type == "TSInterfaceHeritage"
        assert node.extends[0].expression.name == "J"
        prop, method = node.body.body
        assert prop.type == "TSPropertySignature"
        assert prop.optional is True
        assert method.type == "TSMethodSignature"
        assert method.params[0].name == "x"

    def test_type_literal(self):
        node = statement("type P = { x: number };")
        assert node.typeAnnotation.type == "TSTypeLiteral"
        assert node.typeAnnotation.members[0].key.name == "x"

    def test_literal_type(self):
        node = statement("type L = 'a';")
        assert node.typeAnnotation.type == "TSLiteralType"
        assert node.typeAnnotation.literal.value == "a"

    def test_enum(self):
        node = statement("const enum E { A, B = 2 }")
        assert node.type == "TSEnumDeclaration"
        assert node.const is True
        first, second = node.members
        assert first.id.name == "A"
        assert first.initializer is None
        assert second.initializer.value == 2

    def test_namespace(self):
        node = statement("namespace N { export const a = 1; }")
        assert node.type == "TSModuleDeclaration"
        assert node.kind == "namespace"
        assert node.body.type == "TSModuleBlock"
        assert node.body.body[0].type == "ExportNamedDeclaration"

    def test_declare_function(self):
        node = statement("declare function f(a: string): number;")
        assert node.type == "TSDeclareFunction"
        assert node.declare is True
        assert node.body is None

    def test_import_equals(self):
        node = statement("import fs = require('fs');")
        assert node.type == "TSImportEqualsDeclaration"
        assert node.id.name == "fs"
        assert node.moduleReference.type == "TSExternalModuleReference"
        assert node.moduleReference.expression.value == "fs"

    def test_function_type(self):
        alias = statement("type F = <T>(a: string, ...b: T[]) => void;", errorOnUnknownASTType=True,
                          range=True)
        function = alias.typeAnnotation
        assert function.type == "TSFunctionType"
        assert function.typeParameters.params[0].name.name == "T"
        assert [p.type for p in function.params] == ["Identifier", "RestElement"]
        assert function.returnType.type == "TSTypeAnnotation"
        assert function.returnType.typeAnnotation.type == "TSVoidKeyword"
        # the annotation covers "=> void"
        assert function.returnType.range == (35, 42)

    def test_constructor_type(self):
        alias = statement("type C = abstract new (x: number) => Foo;", errorOnUnknownASTType=True)
        constructor = alias.typeAnnotation
        assert constructor.type == "TSConstructorType"
        assert constructor.abstract is True
        assert constructor.params[0].name == "x"
        assert constructor.returnType.typeAnnotation.typeName.name == "Foo"

    def test_tuple_type(self):
        alias = statement("type P = [string, number?, ...boolean[]];", errorOnUnknownASTType=True)
        tuple_type = alias.typeAnnotation
        assert tuple_type.type == "TSTupleType"
        first, second, third = tuple_type.elementTypes
        assert first.type == "TSStringKeyword"
        assert second.type == "TSOptionalType"
        assert second.typeAnnotation.type == "TSNumberKeyword"
        assert third.type == "TSRestType"
        assert third.typeAnnotation.type == "TSArrayType"

    def test_named_tuple_members(self):
        alias = statement("type P = [x: number, y?: string, ...rest: any[]];", errorOnUnknownASTType=True)
        x, y, rest = alias.typeAnnotation.elementTypes
        assert x.type == "TSNamedTupleMember"
        assert x.label.name == "x"
        assert x.optional is False
        assert x.elementType.type == "TSNumberKeyword"
        assert y.optional is True
        assert rest.type == "TSRestType"
        assert rest.typeAnnotation.type == "TSNamedTupleMember"
        assert rest.typeAnnotation.label.name == "rest"

    def test_conditional_type(self):
        alias = statement("type U<T> = T extends Array<infer E> ? E : never;", errorOnUnknownASTType=True)
        conditional = alias.typeAnnotation
        assert conditional.type == "TSConditionalType"
        assert conditional.checkType.typeName.name == "T"
        assert conditional.extendsType.typeName.name == "Array"
        infer = conditional.extendsType.typeParameters.params[0]
        assert infer.type == "TSInferType"
        assert infer.typeParameter.name.name == "E"
        assert conditional.trueType.typeName.name == "E"
        assert conditional.falseType.type == "TSNeverKeyword"

    def test_keyof_and_indexed_access(self):
        alias = statement("type V = T[keyof T];", errorOnUnknownASTType=True)
        access = alias.typeAnnotation
        assert access.type == "TSIndexedAccessType"
        assert access.objectType.typeName.name == "T"
        assert access.indexType.type == "TSTypeOperator"
        assert access.indexType.operator == "keyof"
        assert access.indexType.typeAnnotation.typeName.name == "T"

    def test_readonly_array_type(self):
        alias = statement("type R = readonly string[];", errorOnUnknownASTType=True)
        assert alias.typeAnnotation.type == "TSTypeOperator"
        assert alias.typeAnnotation.operator == "readonly"
        assert alias.typeAnnotation.typeAnnotation.type == "TSArrayType"

    def test_type_query(self):
        alias = statement("type Q = typeof a.b;", errorOnUnknownASTType=True)
        query = alias.typeAnnotation
        assert query.type == "TSTypeQuery"
        assert query.exprName.type == "TSQualifiedName"
        assert query.exprName.left.name == "a"
        assert query.exprName.right.name == "b"

    def test_index_signature(self):
        node = statement("interface D { readonly [key: string]: number; }", errorOnUnknownASTType=True)
        signature = node.body.body[0]
        assert signature.type == "TSIndexSignature"
        assert signature.readonly is True
        parameter = signature.parameters[0]
        assert parameter.name == "key"
        assert parameter.typeAnnotation.typeAnnotation.type == "TSStringKeyword"
        assert signature.typeAnnotation.typeAnnotation.type == "TSNumberKeyword"

    def test_mapped_type(self):
        alias = statement("type M = { readonly [K in keyof T]?: T[K] };", errorOnUnknownASTType=True)
        mapped = alias.typeAnnotation
        assert mapped.type == "TSMappedType"
        assert mapped.typeParameter.name.name == "K"
        assert mapped.typeParameter.constraint.type == "TSTypeOperator"
        assert mapped.nameType is None
        assert mapped.typeAnnotation.type == "TSIndexedAccessType"
        assert mapped.optional is True
        assert mapped.readonly is True

    def test_mapped_type_modifiers(self):
        alias = statement("type M = { -readonly [K in T as Exclude<K, 'x'>]-?: string };")
        mapped = alias.typeAnnotation
        assert mapped.readonly == "-"
        assert mapped.optional == "-"
        assert mapped.nameType.typeName.name == "Exclude"


class TestJSX:
    def test_text_as_jsx_text(self):
        element = expression("<a>hello</a>;", jsx=True, useJSXTextNode=True, range=True)
        assert element.type == "JSXElement"
        assert element.openingElement.name.type == "JSXIdentifier"
        assert element.openingElement.name.name == "a"
        assert element.closingElement.name.name == "a"
        text = element.children[0]
        assert text.type == "JSXText"
        assert text.value == "hello"
        assert text.range == (3, 8)

    def test_text_as_literal(self):
        element = expression("<a>hello</a>;", jsx=True, range=True)
        text = element.children[0]
        assert text.type == "Literal"
        assert text.value == "hello"
        assert text.range == (3, 8)

    def test_self_closing_with_attributes(self):
        element = expression('<Foo.Bar x="1" {...p} />;', jsx=True)
        opening = element.openingElement
        assert opening.selfClosing is True
        assert element.closingElement is None
        assert element.children == []
        assert opening.name.type == "JSXMemberExpression"
        assert opening.name.object.type == "JSXIdentifier"
        assert opening.name.property.name == "Bar"
        attribute, spread = opening.attributes
        assert attribute.type == "JSXAttribute"
        assert attribute.name.type == "JSXIdentifier"
        assert attribute.value.type == "Literal"
        assert attribute.value.value == "1"
        assert spread.type == "JSXSpreadAttribute"
        assert spread.argument.name == "p"

    def test_expression_container(self):
        element = expression("<a>{value}{/* note */}</a>;", jsx=True)
        container, empty = element.children
        assert container.type == "JSXExpressionContainer"
        assert container.expression.type == "Identifier"
        assert empty.expression.type == "JSXEmptyExpression"

    def test_fragment(self):
        fragment = expression("<>x</>;", jsx=True)
        assert fragment.type == "JSXFragment"
        assert fragment.openingFragment.type == "JSXOpeningFragment"
        assert fragment.closingFragment.type == "JSXClosingFragment"

    def test_identifiers_outside_tags_stay_plain(self):
        element = expression("<a b={c.d} />;", jsx=True)
        value = element.openingElement.attributes[0].value.expression
        assert value.type == "MemberExpression"
        assert value.object.type == "Identifier"

    def test_tsx_extension_selects_jsx_grammar(self):
        node = expression("<div />;", filePath="component.tsx")
        assert node.type == "JSXElement"


class TestUnknownKinds:
    def test_pass_through(self):
        node = statement("type Q = `a${B}`;")
        assert node.typeAnnotation.type == "TSTemplateLiteralType"

    def test_strict_mode_raises(self):
        with pytest.raises(UnknownNodeType) as exc_info:
            parse("type Q = `a${B}`;", {"errorOnUnknownASTType": True, "filePath": "q.ts"})
        error = exc_info.value
        assert error.kind == "template_literal_type"
        assert error.file_path.endswith("q.ts")
        assert error.offset == 9


class TestSyntaxErrors:
    def test_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            parse("const = ;")
        assert isinstance(exc_info.value, TypeScriptDiagnosticError)
        assert exc_info.value.line_number == 1
        assert "TS1" in str(exc_info.value)

    def test_missing_token(self):
        with pytest.raises(ParseError):
            parse("let a = (1 + 2;")

    def test_escape_out_of_range(self):
        with pytest.raises(ParseError) as exc_info:
            parse(r"x = '\u{110000}';")
        assert exc_info.value.diagnostic.code == 1198
        assert exc_info.value.index == 4

    def test_template_escape_out_of_range(self):
        with pytest.raises(ParseError):
            parse(r"x = `\u{110000}`;")
