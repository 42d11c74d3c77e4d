"""Data models for tag-releaser.

These Pydantic models represent the structures that flow through a release
run: manifests read from disk, parsed tags, and the request/response pair
exchanged with the release API.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

PRERELEASE_RE = re.compile(r"-(alpha|beta|rc|pre)", re.IGNORECASE)


class RootManifest(BaseModel):
    """The repository root manifest.

    Only ``workspaces`` matters here. npm also allows the object form
    ``{"packages": [...]}``, which is flattened to the list of patterns.

    Attributes:
        workspaces: Glob patterns of workspace package directories.
    """

    workspaces: list[str] = Field(default_factory=list)

    @field_validator("workspaces", mode="before")
    @classmethod
    def _flatten_workspaces(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, dict):
            return value.get("packages", [])
        return value


class PackageManifest(BaseModel):
    """A workspace member manifest; ``name`` and ``version`` are required."""

    name: str
    version: str


class PackageRecord(BaseModel):
    """A workspace package matched to a tag.

    Attributes:
        name: Package name as written in its manifest.
        version: Package version as written in its manifest.
        manifest_path: Path to the manifest file the record was read from.
    """

    name: str
    version: str
    manifest_path: Path

    @property
    def directory(self) -> Path:
        return self.manifest_path.parent

    @property
    def changelog_path(self) -> Path:
        return self.directory / "CHANGELOG.md"


class ParsedTag(BaseModel):
    """A tag split into package name and version at its last ``@``."""

    tag: str
    package_name: str
    version: str

    @property
    def title(self) -> str:
        return f"{self.package_name}@{self.version}"

    @property
    def prerelease(self) -> bool:
        return PRERELEASE_RE.search(self.version) is not None


class ReleaseRequest(BaseModel):
    """Body of a create-release call."""

    tag_name: str
    name: str
    body: str
    draft: bool = False
    prerelease: bool = False

    def payload(self) -> dict[str, object]:
        return self.model_dump()


class Release(BaseModel):
    """The subset of a created release the run reports on."""

    model_config = ConfigDict(extra="ignore")

    id: int
    tag_name: str
    html_url: str


class RepoRef(BaseModel):
    owner: str
    repo: str

    @classmethod
    def parse(cls, value: str) -> RepoRef:
        """Parse an ``owner/repo`` string such as ``$GITHUB_REPOSITORY``."""
        owner, sep, repo = value.strip().partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Expected 'owner/repo', got {value!r}")
        return cls(owner=owner, repo=repo)

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"
