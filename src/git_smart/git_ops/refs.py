"""Read-only inspection of HEAD and the reference list.

Everything here shells out to ``git`` via :func:`run_git` and never writes
to the repository. Git failures surface as :class:`RepositoryError`.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from git_smart.errors import RepositoryError
from git_smart.git_ops.utils import GitCommandError, require_success, run_git
from git_smart.logger import logger

HEADS_PREFIX = "refs/heads/"
REMOTES_PREFIX = "refs/remotes/"
TAGS_PREFIX = "refs/tags/"

# symbolic-ref exits 1 (quietly) when HEAD is detached
_SYMBOLIC_REF_DETACHED = 1


def _shorten(name: str) -> str:
    for prefix in (HEADS_PREFIX, REMOTES_PREFIX, TAGS_PREFIX):
        if name.startswith(prefix):
            return name[len(prefix) :]
    return name


@dataclass(frozen=True)
class BranchRef:
    """What HEAD points at.

    Attributes:
        name: Full reference name, e.g. "refs/heads/main", or "HEAD" when
            detached.
        is_branch: True only when HEAD is a symbolic ref to a local branch.
    """

    name: str
    is_branch: bool

    @property
    def short_name(self) -> str:
        return _shorten(self.name)


@dataclass(frozen=True)
class Reference:
    name: str
    symbolic: bool

    @property
    def is_remote(self) -> bool:
        return self.name.startswith(REMOTES_PREFIX)

    @property
    def short_name(self) -> str:
        return _shorten(self.name)


def _git(repo_path: Path, *args: str) -> subprocess.CompletedProcess[str]:
    try:
        return run_git(*args, cwd=repo_path)
    except (OSError, subprocess.SubprocessError) as exc:
        raise RepositoryError(f"cannot run git in {repo_path}: {exc}") from exc


def current_branch(repo_path: Path) -> BranchRef:
    """Resolve HEAD for the working tree at *repo_path*.

    Raises RepositoryError when *repo_path* is not a git working tree or HEAD
    does not resolve to a commit (e.g. a fresh repo with no commits yet).
    """
    verify = _git(repo_path, "rev-parse", "--verify", "-q", "HEAD")
    if verify.returncode != 0:
        detail = verify.stderr.strip() or "HEAD does not point at a commit"
        raise RepositoryError(f"cannot resolve HEAD in {repo_path}: {detail}")

    result = _git(repo_path, "symbolic-ref", "-q", "HEAD")
    if result.returncode == _SYMBOLIC_REF_DETACHED:
        return BranchRef(name="HEAD", is_branch=False)
    try:
        name = require_success(result)
    except GitCommandError as exc:
        raise RepositoryError(str(exc)) from exc

    return BranchRef(name=name, is_branch=name.startswith(HEADS_PREFIX))


def parse_references(output: str) -> list[Reference]:
    """Parse ``for-each-ref --format='%(refname)%09%(symref)'`` output."""
    refs: list[Reference] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        name, _, target = line.partition("\t")
        refs.append(Reference(name=name, symbolic=bool(target)))
    return refs


def list_references(repo_path: Path) -> list[Reference]:
    """Return every reference in the repository. No references is not an error."""
    result = _git(repo_path, "for-each-ref", "--format=%(refname)%09%(symref)")
    try:
        return parse_references(require_success(result))
    except GitCommandError as exc:
        raise RepositoryError(str(exc)) from exc


def remote_tracking_exists(repo_path: Path, remote_name: str, branch_short_name: str) -> bool:
    """Check whether ``<remote_name>/<branch_short_name>`` exists as a remote ref.

    Symbolic refs such as ``origin/HEAD`` are skipped. An empty *remote_name*
    means there is no remote context and always yields False.
    """
    if not remote_name:
        return False

    wanted = f"{remote_name}/{branch_short_name}"
    for ref in list_references(repo_path):
        if ref.symbolic or not ref.is_remote:
            continue
        if ref.short_name == wanted:
            logger.debug("Remote-tracking ref found", ref=ref.name)
            return True
    return False
