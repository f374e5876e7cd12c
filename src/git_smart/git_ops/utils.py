"""Shared git subprocess helpers."""

from __future__ import annotations

import subprocess
from pathlib import Path


def run_git(
    *args: str,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a git command, capturing stdout and stderr as text.

    ``cwd`` defaults to the current working directory. There is no timeout
    unless one is given; a hook waits for git as long as git takes.
    """
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd) if cwd is not None else None,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


class GitCommandError(Exception):
    """A git command exited non-zero."""

    def __init__(self, argv: list[str], stderr: str, returncode: int) -> None:
        self.argv = argv
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(f"{' '.join(argv)} failed (exit {returncode}): {stderr}")


def require_success(result: subprocess.CompletedProcess[str]) -> str:
    """Return the stripped stdout of *result*, or raise GitCommandError."""
    if result.returncode != 0:
        argv = [str(a) for a in result.args]
        raise GitCommandError(argv, result.stderr.strip(), result.returncode)
    return result.stdout.strip()
