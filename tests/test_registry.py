"""
Tests for the process-wide project registry.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from tsestree.errors import ProjectNotFound
from tsestree.registry import ProjectRegistry, get_registry


def test_global_registry_is_shared():
    assert get_registry() is get_registry()


class TestPrograms:
    def test_same_program_for_same_descriptor(self, make_project):
        root = make_project({"tsconfig.json": {}, "a.ts": "a;"})
        registry = ProjectRegistry()
        descriptor = str(root / "tsconfig.json")
        assert registry.get_program(descriptor) is registry.get_program(descriptor)

    def test_extensions_are_part_of_the_key(self, make_project):
        root = make_project({"tsconfig.json": {}, "a.ts": "a;", "b.vue": "b;"})
        registry = ProjectRegistry()
        descriptor = str(root / "tsconfig.json")
        plain = registry.get_program(descriptor)
        with_vue = registry.get_program(descriptor, [".vue"])
        assert plain is not with_vue
        assert not plain.is_member(str(root / "b.vue"))
        assert with_vue.is_member(str(root / "b.vue"))

    def test_invalidate_reloads(self, make_project):
        root = make_project({"tsconfig.json": {"files": ["a.ts"]}, "a.ts": "a;", "b.ts": "b;"})
        registry = ProjectRegistry()
        descriptor = str(root / "tsconfig.json")
        first = registry.get_program(descriptor)
        assert not first.is_member(str(root / "b.ts"))

        (root / "tsconfig.json").write_text('{"files": ["a.ts", "b.ts"]}', encoding="utf-8")
        # stale until invalidated
        assert registry.get_program(descriptor) is first

        registry.invalidate(descriptor)
        second = registry.get_program(descriptor)
        assert second is not first
        assert second.is_member(str(root / "b.ts"))

    def test_missing_descriptor(self, tmp_path):
        with pytest.raises(ProjectNotFound):
            ProjectRegistry().get_program(str(tmp_path / "tsconfig.json"))

    def test_concurrent_first_load(self, make_project):
        root = make_project({"tsconfig.json": {}, "a.ts": "a;", "b.ts": "b;"})
        registry = ProjectRegistry()
        descriptor = str(root / "tsconfig.json")
        with ThreadPoolExecutor(max_workers=8) as pool:
            programs = list(pool.map(lambda _: registry.get_program(descriptor), range(16)))
        assert all(p is programs[0] for p in programs)
        assert registry.get_stats()["programs"] == 1


class TestResolve:
    def test_resolve_in_descriptor_order(self, make_project):
        root = make_project({
            "tsconfig.json": {"include": ["src"]},
            "tsconfig.test.json": {"include": ["src", "test"]},
            "src/a.ts": "a;",
            "test/a.test.ts": "t;",
        })
        registry = ProjectRegistry()
        descriptors = ["./tsconfig.json", "./tsconfig.test.json"]
        source = registry.resolve(str(root / "src" / "a.ts"), descriptors, str(root))
        test = registry.resolve(str(root / "test" / "a.test.ts"), descriptors, str(root))
        assert source.config_file_path == str(root / "tsconfig.json")
        assert test.config_file_path == str(root / "tsconfig.test.json")

    def test_directory_descriptor(self, make_project):
        root = make_project({"app/tsconfig.json": {}, "app/a.ts": "a;"})
        program = ProjectRegistry().resolve(str(root / "app" / "a.ts"), ["./app"], str(root))
        assert program.config_file_path == str(root / "app" / "tsconfig.json")

    def test_no_match(self, make_project):
        root = make_project({"tsconfig.json": {"files": ["a.ts"]}, "a.ts": "a;"})
        registry = ProjectRegistry()
        assert registry.resolve(str(root / "other.ts"), ["./tsconfig.json"], str(root)) is None
        assert registry.get_stats() == {"programs": 1, "resolutions": 1, "default_programs": 0}

    def test_default_program_is_cached(self, make_project):
        root = make_project({"tsconfig.json": {"files": ["a.ts"]}, "a.ts": "a;"})
        registry = ProjectRegistry()
        messages = []
        kwargs = dict(allow_default_program=True, code="x;", log=messages.append)
        first = registry.resolve(str(root / "other.ts"), ["./tsconfig.json"], str(root), **kwargs)
        second = registry.resolve(str(root / "other.ts"), ["./tsconfig.json"], str(root), **kwargs)
        assert first is second
        assert first.config_file_path is None
        assert first.get_source_file(str(root / "other.ts")).text == "x;"
        assert len(messages) == 1

    def test_invalidate_file(self, make_project):
        root = make_project({"tsconfig.json": {"files": ["a.ts"]}, "a.ts": "a;"})
        registry = ProjectRegistry()
        path = str(root / "other.ts")
        first = registry.resolve(path, ["./tsconfig.json"], str(root),
                                 allow_default_program=True, code="x;", log=lambda m: None)
        registry.invalidate_file(path)
        assert registry.get_stats()["default_programs"] == 0
        second = registry.resolve(path, ["./tsconfig.json"], str(root),
                                  allow_default_program=True, code="x;", log=lambda m: None)
        assert second is not first

    def test_invalidate_drops_resolutions(self, make_project):
        root = make_project({"tsconfig.json": {}, "a.ts": "a;"})
        registry = ProjectRegistry()
        registry.resolve(str(root / "a.ts"), ["./tsconfig.json"], str(root))
        registry.invalidate(str(root / "tsconfig.json"))
        assert registry.get_stats() == {"programs": 0, "resolutions": 0, "default_programs": 0}

    def test_clear(self, make_project):
        root = make_project({"tsconfig.json": {}, "a.ts": "a;"})
        registry = ProjectRegistry()
        registry.resolve(str(root / "a.ts"), ["./tsconfig.json"], str(root))
        registry.clear()
        assert registry.get_stats() == {"programs": 0, "resolutions": 0, "default_programs": 0}
