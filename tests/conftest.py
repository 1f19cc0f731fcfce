"""Shared fixtures for the tsestree test suite."""

import json

import pytest

from tsestree.registry import get_registry


@pytest.fixture(autouse=True)
def clean_registry():
    """Every test starts and ends with an empty process-wide registry."""
    get_registry().clear()
    yield
    get_registry().clear()


@pytest.fixture(autouse=True)
def no_debug_env(monkeypatch):
    monkeypatch.delenv("TSESTREE_DEBUG", raising=False)


@pytest.fixture
def make_project(tmp_path):
    """Write a project layout: {relative path: text}; dicts are written as JSON."""
    def _make(files):
        for name, content in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, dict):
                content = json.dumps(content)
            path.write_text(content, encoding="utf-8")
        return tmp_path
    return _make
