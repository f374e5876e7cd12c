"""Git operations — HEAD and reference inspection, shared helpers."""

from git_smart.git_ops.refs import (
    BranchRef,
    Reference,
    current_branch,
    list_references,
    parse_references,
    remote_tracking_exists,
)
from git_smart.git_ops.utils import (
    GitCommandError,
    require_success,
    run_git,
)

__all__ = [
    "BranchRef",
    "GitCommandError",
    "Reference",
    "current_branch",
    "list_references",
    "parse_references",
    "remote_tracking_exists",
    "require_success",
    "run_git",
]
