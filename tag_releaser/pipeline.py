"""Release pipeline: tags → workspace → match → notes → publish.

This module orchestrates one tag-releaser run:
1. Find the tags pointing at HEAD (nothing to do if there are none)
2. Read the root manifest and expand its workspace patterns
3. For each ``name@version`` tag, find the workspace package it refers to
4. Pull that version's notes out of the package's CHANGELOG.md
5. Create a GitHub release for the tag

Problems with a single tag are logged and the run moves on to the next tag.
Only configuration, root-manifest and git failures stop the run.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from .changelog import release_notes_for
from .errors import ConfigError, ReleaseAPIError
from .github import DEFAULT_API_URL, GitHubClient
from .manifests import find_package_manifests, load_root_manifest
from .models import ReleaseRequest, RepoRef
from .shell import (
    current_commit,
    error,
    info,
    step,
    tags_pointing_at,
    warning,
    write_output,
)
from .tags import find_matching_package, parse_tag

CREATED = "created"
EXISTS = "exists"
FAILED = "failed"
SKIPPED = "skipped"

NOTES_PREVIEW_CHARS = 100


class ReleaseSummary(BaseModel):
    """Outcome of a run, keyed by outcome then listing tags in processing order."""

    created: list[str] = Field(default_factory=list)
    exists: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    def record(self, tag: str, outcome: str) -> None:
        getattr(self, outcome).append(tag)


def discover_tags() -> list[str]:
    step("Finding tags for current commit")
    commit = current_commit()
    tags = tags_pointing_at(commit)
    info(f"  {commit}: {', '.join(tags) if tags else '<none>'}")
    return tags


def discover_manifests(root: Path) -> list[Path]:
    """Read the root manifest and list every workspace member manifest.

    Raises:
        ManifestError: If the root manifest is missing or malformed.
    """
    step("Discovering workspace packages")
    root_manifest, manifest_name = load_root_manifest(root)
    info(f"  Workspace patterns: {', '.join(root_manifest.workspaces) or '<none>'}")

    paths = find_package_manifests(root, root_manifest.workspaces, manifest_name)
    for path in paths:
        info(f"  {path}")
    if not paths:
        warning("No workspace packages found")
    return paths


def publish_tag(
    tag: str,
    manifest_paths: list[Path],
    client: GitHubClient,
    repo: RepoRef,
) -> str:
    """Create the release for one tag and return the outcome.

    Never raises for problems specific to this tag: malformed tags and tags
    with no matching package are skipped, and API failures are logged.
    """
    step(f"Processing tag: {tag}")

    parsed = parse_tag(tag)
    if parsed is None:
        info(f"  Skipping tag {tag} - doesn't match package@version format")
        return SKIPPED
    info(f"  Parsed: package={parsed.package_name}, version={parsed.version}")

    package = find_matching_package(parsed, manifest_paths)
    if package is None:
        warning(f"No matching package found for {parsed.title}")
        return SKIPPED
    info(f"  Found matching package: {package.manifest_path}")

    try:
        notes = release_notes_for(package)
    except (OSError, UnicodeDecodeError) as exc:
        error(f"Failed to read {package.changelog_path} for {tag}: {exc}")
        return FAILED
    info(f"  Release notes: {notes[:NOTES_PREVIEW_CHARS]}...")

    request = ReleaseRequest(
        tag_name=tag,
        name=parsed.title,
        body=notes,
        draft=False,
        prerelease=parsed.prerelease,
    )
    try:
        release = client.create_release(repo, request)
    except ReleaseAPIError as exc:
        if exc.already_exists:
            warning(f"Release for {tag} already exists")
            return EXISTS
        error(f"Failed to create release for {tag}: {exc}")
        return FAILED

    info(f"  ✓ Created release for {tag}: {release.html_url}")
    return CREATED


def run_release(
    *,
    root: Path,
    token: str | None,
    repository: str | None,
    api_url: str = DEFAULT_API_URL,
) -> ReleaseSummary:
    """Execute a full release run.

    Args:
        root: Repository root holding the root manifest.
        token: GitHub token; only required once there is something to release.
        repository: ``owner/repo`` the releases are created in.
        api_url: GitHub REST API root.

    Raises:
        ConfigError: If the token or repository is missing or malformed.
        ManifestError: If the root manifest cannot be read.
        subprocess.CalledProcessError: If git cannot resolve HEAD or list tags.
    """
    summary = ReleaseSummary()

    tags = discover_tags()
    if not tags:
        info("No tags found for current commit - nothing to do.")
        return summary

    if not token:
        raise ConfigError(
            "GitHub token is not set. Pass --token or set the INPUT_TOKEN "
            "or GITHUB_TOKEN environment variable."
        )
    if not repository:
        raise ConfigError("Repository is not set. Pass --repository or set GITHUB_REPOSITORY.")
    try:
        repo = RepoRef.parse(repository)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    manifest_paths = discover_manifests(root)

    with GitHubClient(token, api_url=api_url) as client:
        for tag in tags:
            summary.record(tag, publish_tag(tag, manifest_paths, client, repo))

    write_output("created", json.dumps(summary.created))
    write_output("created-count", str(len(summary.created)))

    step("Summary")
    for outcome in (CREATED, EXISTS, SKIPPED, FAILED):
        tags_for_outcome = getattr(summary, outcome)
        if tags_for_outcome:
            info(f"  {outcome}: {', '.join(tags_for_outcome)}")
    return summary
