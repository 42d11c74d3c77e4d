"""Workspace manifest reading.

Two workspace flavours are understood:

- npm/yarn/pnpm style: a root ``package.json`` whose ``workspaces`` patterns
  point at directories that each hold a ``package.json``.
- uv style: a root ``pyproject.toml`` whose ``[tool.uv.workspace].members``
  patterns point at directories that each hold a ``pyproject.toml``. These are
  read with tomlkit and names are normalized per PEP 503.

The root manifest is read eagerly and any problem with it is fatal. Member
manifests are read lazily by the tag matcher and a bad member is only a
warning.
"""

from __future__ import annotations

import glob
import json
from pathlib import Path

import tomlkit
from packaging.utils import canonicalize_name
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import ManifestError
from .models import PackageManifest, PackageRecord, RootManifest
from .shell import warning

PACKAGE_JSON = "package.json"
PYPROJECT = "pyproject.toml"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file."""
    return tomlkit.parse(path.read_text())


def _load_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def load_root_manifest(root: Path) -> tuple[RootManifest, str]:
    """Read the root manifest and the member manifest filename it implies.

    ``package.json`` wins when both it and ``pyproject.toml`` exist.

    Raises:
        ManifestError: If no root manifest exists or it cannot be parsed.
    """
    package_json = root / PACKAGE_JSON
    pyproject = root / PYPROJECT

    if package_json.exists():
        try:
            data = _load_json(package_json)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ManifestError(f"Cannot read {package_json}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"{package_json} must contain a JSON object")
        try:
            return RootManifest.model_validate(data), PACKAGE_JSON
        except ValidationError as exc:
            raise ManifestError(f"Invalid {package_json}: {exc}") from exc

    if pyproject.exists():
        try:
            doc = load_pyproject(pyproject)
        except (OSError, TOMLKitError) as exc:
            raise ManifestError(f"Cannot read {pyproject}: {exc}") from exc
        members = doc.get("tool", {}).get("uv", {}).get("workspace", {}).get("members")
        try:
            return RootManifest.model_validate({"workspaces": members}), PYPROJECT
        except ValidationError as exc:
            raise ManifestError(f"Invalid workspace members in {pyproject}: {exc}") from exc

    raise ManifestError(f"No {PACKAGE_JSON} or {PYPROJECT} found in {root}")


def find_package_manifests(
    root: Path, patterns: list[str], manifest_name: str = PACKAGE_JSON
) -> list[Path]:
    """Expand workspace patterns into member manifest paths.

    Pattern order is preserved and matches within one pattern are sorted.
    Duplicates across patterns are kept; matching reads by content, so a
    manifest seen twice is harmless.
    """
    paths: list[Path] = []
    for pattern in patterns:
        manifest_pattern = str(root / pattern / manifest_name)
        paths.extend(Path(m) for m in sorted(glob.glob(manifest_pattern, recursive=True)))
    return paths


def package_key(name: str, manifest_path: Path) -> str:
    """Normalize a package name for comparison against a given manifest kind."""
    if manifest_path.name == PYPROJECT:
        return canonicalize_name(name)
    return name


def read_package(manifest_path: Path) -> PackageRecord | None:
    """Read a member manifest, returning None (with a warning) if it is unusable."""
    try:
        if manifest_path.name == PYPROJECT:
            project = load_pyproject(manifest_path).get("project", {})
            if not isinstance(project, dict):
                project = {}
            data = {"name": project.get("name"), "version": project.get("version")}
        else:
            data = _load_json(manifest_path)
        manifest = PackageManifest.model_validate(data)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, TOMLKitError) as exc:
        warning(f"Cannot read {manifest_path}: {exc}")
        return None
    except ValidationError as exc:
        warning(f"Skipping {manifest_path}: {exc.error_count()} invalid field(s)")
        return None

    return PackageRecord(
        name=package_key(manifest.name, manifest_path),
        version=manifest.version,
        manifest_path=manifest_path,
    )
