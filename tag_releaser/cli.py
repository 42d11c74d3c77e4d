"""CLI entry point for tag-releaser."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from tag_releaser.changelog import release_notes_for
from tag_releaser.github import DEFAULT_API_URL
from tag_releaser.manifests import PACKAGE_JSON, PYPROJECT, read_package
from tag_releaser.pipeline import run_release
from tag_releaser.shell import failed, reset_failed, set_failed


@click.group()
@click.version_option(package_name="tag-releaser")
def cli() -> None:
    """Create GitHub releases for name@version tags in a monorepo."""


@cli.command()
@click.option(
    "--token",
    envvar=["INPUT_TOKEN", "GITHUB_TOKEN"],
    show_envvar=True,
    help="GitHub token used to create releases.",
)
@click.option(
    "--repository",
    envvar="GITHUB_REPOSITORY",
    show_envvar=True,
    help="Target repository as owner/repo.",
)
@click.option(
    "--api-url",
    envvar="GITHUB_API_URL",
    default=DEFAULT_API_URL,
    show_default=True,
    help="GitHub REST API root.",
)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Repository root containing the root manifest.",
)
def release(token: str | None, repository: str | None, api_url: str, root: Path) -> None:
    """Create releases for the tags on HEAD (usually called from CI)."""
    reset_failed()
    try:
        run_release(root=root, token=token, repository=repository, api_url=api_url)
    except Exception as exc:
        set_failed(f"Error creating releases: {exc}")
    if failed():
        sys.exit(1)


@cli.command()
@click.argument(
    "package_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.argument("version")
def notes(package_dir: Path, version: str) -> None:
    """Print the release notes VERSION of the package in PACKAGE_DIR would get."""
    for manifest_name in (PACKAGE_JSON, PYPROJECT):
        manifest_path = package_dir / manifest_name
        if manifest_path.exists():
            break
    else:
        raise click.ClickException(f"No {PACKAGE_JSON} or {PYPROJECT} in {package_dir}")

    package = read_package(manifest_path)
    if package is None:
        raise click.ClickException(f"Cannot read package manifest {manifest_path}")

    if package.version != version:
        # Preview an older or upcoming version from the same changelog.
        package = package.model_copy(update={"version": version})
    click.echo(release_notes_for(package))
