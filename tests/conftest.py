"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tag_releaser import shell


def write_package(root: Path, rel_dir: str, name: str, version: str) -> Path:
    """Write a member package.json and return its path."""
    package_dir = root / rel_dir
    package_dir.mkdir(parents=True, exist_ok=True)
    manifest = package_dir / "package.json"
    manifest.write_text(json.dumps({"name": name, "version": version}))
    return manifest


@pytest.fixture(autouse=True)
def _reset_failed_flag():
    shell.reset_failed()
    yield
    shell.reset_failed()


@pytest.fixture
def npm_workspace(tmp_path: Path) -> Path:
    """A workspace with two packages, one of which has a changelog."""
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "root", "private": True, "workspaces": ["packages/*"]})
    )
    write_package(tmp_path, "packages/foo", "foo", "1.0.0")
    write_package(tmp_path, "packages/bar", "@acme/bar", "2.1.0-beta.1")
    (tmp_path / "packages" / "foo" / "CHANGELOG.md").write_text(
        "# foo\n\n## 1.0.0\n\n- First stable release\n\n## 0.9.0\n\n- Preview\n"
    )
    return tmp_path


@pytest.fixture
def uv_workspace(tmp_path: Path) -> Path:
    """A uv workspace with a single member."""
    (tmp_path / "pyproject.toml").write_text(
        '[tool.uv.workspace]\nmembers = ["libs/*"]\n'
    )
    member = tmp_path / "libs" / "my_lib"
    member.mkdir(parents=True)
    (member / "pyproject.toml").write_text(
        '[project]\nname = "My_Lib"\nversion = "0.3.0"\n'
    )
    return tmp_path
