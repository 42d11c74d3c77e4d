"""Changelog section extraction.

A version's notes are the lines between its level-2 heading (``## 1.2.0`` or
``## [1.2.0]``, optionally followed by a date or anything else) and the next
level-2 heading. Only the first section for a version is used.
"""

from __future__ import annotations

import enum
import re
from pathlib import Path

from .models import PackageRecord
from .shell import info

NEXT_HEADING_RE = re.compile(r"^##\s+")


class _State(enum.Enum):
    SCANNING = "scanning"
    IN_SECTION = "in_section"


def fallback_notes(version: str) -> str:
    return f"Release {version}"


def extract_section(text: str, version: str) -> str:
    """Return the trimmed notes for ``version`` from changelog ``text``.

    The version is matched literally, so ``1.0.0+build`` does not match
    ``1.0.0-build``. Falls back to ``Release <version>`` when the heading is
    missing or its section is blank.

    Examples:
        >>> extract_section("## 2.0.0\\nB\\n## 1.0.0\\nA\\n", "1.0.0")
        'A'
        >>> extract_section("## [1.0.0]\\n\\n", "1.0.0")
        'Release 1.0.0'
    """
    heading_re = re.compile(rf"^##\s+\[?{re.escape(version)}\]?")
    state = _State.SCANNING
    notes: list[str] = []

    for line in text.split("\n"):
        if state is _State.SCANNING:
            if heading_re.match(line):
                state = _State.IN_SECTION
            continue
        if NEXT_HEADING_RE.match(line):
            break
        notes.append(line)

    return "\n".join(notes).strip() or fallback_notes(version)


def extract_changelog_for_version(changelog_path: Path, version: str) -> str:
    """Read ``changelog_path`` and extract the section for ``version``.

    The caller checks that the file exists; read errors propagate.
    """
    return extract_section(changelog_path.read_text(encoding="utf-8"), version)


def release_notes_for(package: PackageRecord) -> str:
    """Notes to publish for a matched package.

    Uses the package's CHANGELOG.md when present, otherwise a one-line
    ``Release <version> of <name>`` placeholder.
    """
    if package.changelog_path.exists():
        return extract_changelog_for_version(package.changelog_path, package.version)
    info("  No CHANGELOG.md found, using default release notes")
    return f"Release {package.version} of {package.name}"
