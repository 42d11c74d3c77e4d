"""Tests for tag_releaser.tags."""

from __future__ import annotations

from pathlib import Path

from conftest import write_package

from tag_releaser.tags import find_matching_package, parse_tag


class TestParseTag:
    def test_simple(self) -> None:
        parsed = parse_tag("foo@1.0.0")
        assert parsed is not None
        assert parsed.package_name == "foo"
        assert parsed.version == "1.0.0"
        assert parsed.tag == "foo@1.0.0"

    def test_scoped_package(self) -> None:
        parsed = parse_tag("@acme/bar@2.0.0")
        assert parsed is not None
        assert parsed.package_name == "@acme/bar"
        assert parsed.version == "2.0.0"

    def test_splits_at_last_at_sign(self) -> None:
        parsed = parse_tag("foo@1.0.0@build")
        assert parsed is not None
        assert parsed.package_name == "foo@1.0.0"
        assert parsed.version == "build"

    def test_no_at_sign(self) -> None:
        assert parse_tag("v1.0.0") is None

    def test_empty_name(self) -> None:
        assert parse_tag("@1.0.0") is None

    def test_empty_version(self) -> None:
        assert parse_tag("foo@") is None


class TestFindMatchingPackage:
    def test_matches_name_and_version(self, tmp_path: Path) -> None:
        paths = [
            write_package(tmp_path, "a", "foo", "0.9.0"),
            write_package(tmp_path, "b", "foo", "1.0.0"),
        ]
        parsed = parse_tag("foo@1.0.0")
        assert parsed is not None

        record = find_matching_package(parsed, paths)

        assert record is not None
        assert record.manifest_path == paths[1]
        assert record.directory == tmp_path / "b"

    def test_version_mismatch(self, tmp_path: Path) -> None:
        paths = [write_package(tmp_path, "a", "foo", "1.0.1")]
        parsed = parse_tag("foo@1.0.0")
        assert parsed is not None
        assert find_matching_package(parsed, paths) is None

    def test_first_match_wins(self, tmp_path: Path) -> None:
        paths = [
            write_package(tmp_path, "a", "foo", "1.0.0"),
            write_package(tmp_path, "b", "foo", "1.0.0"),
        ]
        parsed = parse_tag("foo@1.0.0")
        assert parsed is not None

        record = find_matching_package(parsed, paths)

        assert record is not None
        assert record.manifest_path == paths[0]

    def test_skips_invalid_manifests(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken" / "package.json"
        broken.parent.mkdir()
        broken.write_text("{not json")
        versionless = tmp_path / "private" / "package.json"
        versionless.parent.mkdir()
        versionless.write_text('{"name": "foo"}')
        good = write_package(tmp_path, "good", "foo", "1.0.0")
        parsed = parse_tag("foo@1.0.0")
        assert parsed is not None

        record = find_matching_package(parsed, [broken, versionless, good])

        assert record is not None
        assert record.manifest_path == good

    def test_pyproject_names_are_normalized(self, uv_workspace: Path) -> None:
        manifest = uv_workspace / "libs" / "my_lib" / "pyproject.toml"
        parsed = parse_tag("my-lib@0.3.0")
        assert parsed is not None

        record = find_matching_package(parsed, [manifest])

        assert record is not None
        assert record.name == "my-lib"
