"""Tag parsing and tag-to-package matching."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from .manifests import package_key, read_package
from .models import PackageRecord, ParsedTag

# Greedy name group: the split happens at the last "@", so scoped npm names
# like "@scope/pkg@1.0.0" parse as ("@scope/pkg", "1.0.0").
TAG_RE = re.compile(r"^(.+)@(.+)$")


def parse_tag(tag: str) -> ParsedTag | None:
    """Split ``name@version``; returns None for tags of any other shape."""
    match = TAG_RE.match(tag)
    if not match:
        return None
    package_name, version = match.groups()
    if not package_name or not version:
        return None
    return ParsedTag(tag=tag, package_name=package_name, version=version)


def find_matching_package(
    parsed: ParsedTag, manifest_paths: Iterable[Path]
) -> PackageRecord | None:
    """Return the first workspace package whose name and version match the tag.

    Manifests are read one at a time, in order, and scanning stops at the
    first match.
    """
    for path in manifest_paths:
        record = read_package(path)
        if record is None:
            continue
        if (
            record.name == package_key(parsed.package_name, path)
            and record.version == parsed.version
        ):
            return record
    return None
