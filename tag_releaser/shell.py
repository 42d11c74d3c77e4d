"""Shell, git and CI log utilities.

Provides thin wrappers around subprocess calls for the two git queries the
release run needs, plus output helpers that speak the GitHub Actions
workflow-command protocol so warnings and errors are annotated in the job log.
"""

from __future__ import annotations

import os
import subprocess
import sys

_failed = False


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "rev-parse", "HEAD").
        check: If True (default), raise on non-zero exit.

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def current_commit() -> str:
    """Return the full SHA of HEAD."""
    return git("rev-parse", "HEAD")


def tags_pointing_at(commit: str) -> list[str]:
    """List tags pointing exactly at ``commit``, in the order git prints them."""
    output = git("tag", "--points-at", commit)
    return [tag for tag in output.split("\n") if tag]


def _escape(msg: str) -> str:
    return msg.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def info(msg: str) -> None:
    print(msg)


def warning(msg: str) -> None:
    """Emit a ``::warning::`` annotation."""
    print(f"::warning::{_escape(msg)}")


def error(msg: str) -> None:
    """Emit an ``::error::`` annotation."""
    print(f"::error::{_escape(msg)}", file=sys.stderr)


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def set_failed(msg: str) -> None:
    """Report an error and mark the whole run as failed.

    The process is not terminated here; the CLI turns the failed flag into
    exit code 1 once the run returns.
    """
    global _failed
    error(msg)
    _failed = True


def failed() -> bool:
    return _failed


def reset_failed() -> None:
    global _failed
    _failed = False


def write_output(name: str, value: str) -> None:
    """Append a step output to ``$GITHUB_OUTPUT``; no-op outside Actions."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a") as fh:
        fh.write(f"{name}={value}\n")
