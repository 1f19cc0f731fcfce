"""
Tests for the native <-> standardized correspondence maps and position fields.
"""

import pytest

from tsestree import parse_and_generate_services
from tsestree.node_maps import AstMaps
from tsestree.types import Node, Token

SOURCE = (
    "import { a, b as c } from './m';\n"
    "export class K<T> extends Base implements I {\n"
    "  private x = 1;\n"
    "  constructor(public y: number = 2) { super(); }\n"
    "  get v(): string { return `v${this.x}`; }\n"
    "}\n"
    "for (const [i, j] of pairs) { ({ i, j = 3 } = obj); }\n"
    "const fn = async ({ p }: { p: T }, ...rest: any[]) => p ?? rest[0];\n"
    "enum E { A, B = 1 }\n"
    "type U = 'a' | Foo.Bar | Array<number>;\n"
    "let n = (1 + 2) * 3;"
)

JSX_SOURCE = '<A.B x="1" {...p}>text {value}{/* c */}<br /></A.B>;'

TYPES_SOURCE = (
    "type F = (a: string) => void;\n"
    "type C = abstract new () => object;\n"
    "interface D { readonly [k: string]: number }\n"
    "type M = { [K in keyof T]?: T[K] };\n"
    "type P = [x: number, y?: string, ...r: any[]];\n"
    "type X<V> = V extends Array<infer I> ? I : typeof v;"
)

# Nodes built in addition to the node that represents their native node
SYNTHESIZED_TYPES = {
    "Identifier", "Literal", "TemplateElement", "FunctionExpression", "VariableDeclaration",
    "VariableDeclarator", "JSXOpeningElement", "JSXEmptyExpression", "AssignmentPattern",
    "TSQualifiedName", "TSTypeAnnotation", "TSNamedTupleMember",
}


def services_for(code, **options):
    options.setdefault("preserveNodeMaps", True)
    options.setdefault("range", True)
    options.setdefault("loc", True)
    return parse_and_generate_services(code, options)


def assert_round_trip(ast, services):
    to_native = services.standard_to_native_map
    to_standard = services.native_to_standard_map
    representative = 0
    for node in ast.walk():
        native = to_native.get(node)
        assert native is not None, f"{node!r} has no native node"
        if to_standard.get(native) is node:
            representative += 1
            assert node.range == (native.start_byte, native.end_byte), node
            assert node.loc.start.line == native.start_point[0] + 1, node
            assert node.loc.start.column == native.start_point[1], node
            assert node.loc.end.line == native.end_point[0] + 1, node
            assert node.loc.end.column == native.end_point[1], node
        else:
            assert node.type in SYNTHESIZED_TYPES, node
    return representative


class TestRoundTrip:
    def test_typescript_source(self):
        ast, services = services_for(SOURCE)
        assert assert_round_trip(ast, services) > 50

    def test_jsx_source(self):
        ast, services = services_for(JSX_SOURCE, jsx=True)
        assert assert_round_trip(ast, services) > 5

    def test_type_forms(self):
        ast, services = services_for(TYPES_SOURCE)
        assert assert_round_trip(ast, services) > 30

    def test_root_maps_to_root(self):
        ast, services = services_for("a;")
        native = services.standard_to_native_map[ast]
        assert native.type == "program"
        assert services.native_to_standard_map[native] is ast

    def test_boundaries(self):
        code = "let a = 1;\nlet bb = 22;"
        ast, _ = services_for(code)
        assert ast.range == (0, len(code.encode("utf-8")))
        assert (ast.loc.end.line, ast.loc.end.column) == (2, 12)
        last = ast.body[-1].declarations[0].init
        assert last.range == (len(code) - 3, len(code) - 1)

    def test_utf8_offsets(self):
        code = "const s = 'é'; x;"
        ast, _ = services_for(code)
        statement = ast.body[1]
        # 'é' is two bytes in UTF-8
        assert statement.range == (16, 18)
        assert statement.loc.start.column == 16


class TestFoldings:
    def test_parenthesized_expression_has_no_entry(self):
        ast, services = services_for("(a + b) * c;")
        inner = ast.body[0].expression.left
        native = services.standard_to_native_map[inner]
        assert native.type == "binary_expression"
        assert native.parent.type == "parenthesized_expression"
        assert native.parent not in services.native_to_standard_map

    def test_shorthand_property_shares_native_node(self):
        ast, services = services_for("({ a });")
        prop = ast.body[0].expression.properties[0]
        native = services.standard_to_native_map[prop]
        assert services.standard_to_native_map[prop.key] == native
        assert services.standard_to_native_map[prop.value] == native
        assert services.native_to_standard_map[native] is prop

    def test_tokens_map_to_leaves(self):
        ast, services = services_for("let a = 1;", tokens=True)
        for token in ast.tokens:
            native = services.standard_to_native_map[token]
            assert (native.start_byte, native.end_byte) == token.range


class TestMapViews:
    def test_view_protocol(self):
        ast, services = services_for("a;")
        view = services.standard_to_native_map
        assert ast in view
        assert view.has(ast)
        assert len(view) >= 3
        stranger = Node("Identifier")
        assert view.get(stranger) is None
        assert view.get(stranger, "missing") == "missing"
        assert not view.has(stranger)
        with pytest.raises(KeyError):
            view[stranger]

    def test_views_reject_foreign_keys(self):
        ast, services = services_for("a;")
        assert services.native_to_standard_map.get(ast) is None
        assert "a" not in services.standard_to_native_map

    def test_first_registration_wins(self):
        ast, services = services_for("a;")
        native = services.standard_to_native_map[ast]
        maps = AstMaps()
        first, second = Node("Program"), Node("Identifier")
        maps.register(native, first)
        maps.register(native, second)
        assert maps.native_to_standard[native] is first
        assert maps.standard_to_native[second] == native
        assert maps.is_representative(first)
        assert not maps.is_representative(second)

    def test_register_token(self):
        ast, services = services_for("a;")
        native = services.standard_to_native_map[ast]
        maps = AstMaps()
        token = Token(type="Identifier", value="a")
        maps.register_token(native, token)
        assert token in maps.standard_to_native
        assert len(maps.native_to_standard) == 0
