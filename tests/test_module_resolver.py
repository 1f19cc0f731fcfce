"""
Tests for import specifier resolution.
"""

from tsestree.module_resolver import is_relative_specifier, resolve_module_name


class TestResolveModuleName:
    def test_relative_with_extension_probing(self, make_project):
        root = make_project({"src/a.ts": "", "src/b.ts": ""})
        resolved = resolve_module_name("./b", str(root / "src" / "a.ts"))
        assert resolved is not None
        assert resolved.file_path == str(root / "src" / "b.ts")
        assert resolved.kind == "relative"
        assert resolved.extension == ".ts"

    def test_relative_js_extension_maps_to_ts(self, make_project):
        root = make_project({"a.ts": "", "b.ts": ""})
        resolved = resolve_module_name("./b.js", str(root / "a.ts"))
        assert resolved is not None
        assert resolved.file_path == str(root / "b.ts")

    def test_directory_index(self, make_project):
        root = make_project({"a.ts": "", "lib/index.tsx": ""})
        resolved = resolve_module_name("./lib", str(root / "a.ts"))
        assert resolved is not None
        assert resolved.file_path == str(root / "lib" / "index.tsx")

    def test_parent_directory(self, make_project):
        root = make_project({"src/deep/a.ts": "", "src/util.ts": ""})
        resolved = resolve_module_name("../util", str(root / "src" / "deep" / "a.ts"))
        assert resolved.file_path == str(root / "src" / "util.ts")

    def test_unresolved_relative(self, make_project):
        root = make_project({"a.ts": ""})
        assert resolve_module_name("./missing", str(root / "a.ts")) is None

    def test_bare_specifier_without_base_url(self, make_project):
        root = make_project({"a.ts": "", "react.ts": ""})
        assert resolve_module_name("react", str(root / "a.ts")) is None

    def test_base_url(self, make_project):
        root = make_project({"src/a.ts": "", "src/shared/util.ts": ""})
        resolved = resolve_module_name("shared/util", str(root / "src" / "a.ts"),
                                       {"baseUrl": str(root / "src")})
        assert resolved is not None
        assert resolved.kind == "base_url"
        assert resolved.file_path == str(root / "src" / "shared" / "util.ts")

    def test_is_relative_specifier(self):
        assert is_relative_specifier("./a")
        assert is_relative_specifier("../a")
        assert not is_relative_specifier("a")
        assert not is_relative_specifier("@scope/a")
