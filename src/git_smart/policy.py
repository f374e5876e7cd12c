"""Pre-push branch policy.

Decides whether the current branch may be pushed:

  1. hook disabled                          → allowed
  2. protected check applies and a protected
     pattern matches the branch name        → blocked (protected)
  3. no valid pattern matches               → blocked (invalid name)
  4. otherwise                              → allowed

The protected check applies when the branch already exists on the remote, or
when ``enforceProtectedBranchesOnNonExistentRemote`` is set. Patterns are
searched anywhere in the branch name; anchor them with ``^...$`` for an exact
match.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable

from git_smart.config import Configuration
from git_smart.errors import ConfigurationError
from git_smart.logger import logger


class PolicyVerdict(enum.Enum):
    ALLOWED = "allowed"
    BLOCKED_PROTECTED = "blocked-protected"
    BLOCKED_INVALID_NAME = "blocked-invalid-name"

    @property
    def allowed(self) -> bool:
        return self is PolicyVerdict.ALLOWED

    @property
    def message(self) -> str | None:
        return _MESSAGES.get(self)


_MESSAGES = {
    PolicyVerdict.BLOCKED_PROTECTED: "Current branch is protected",
    PolicyVerdict.BLOCKED_INVALID_NAME: "Current branch does not meet naming requirements",
}


def compile_pattern(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"invalid regular expression {pattern!r}: {exc}") from exc


def first_match(patterns: Iterable[str], subject: str) -> str | None:
    """Return the first pattern (in order) found anywhere in *subject*."""
    for pattern in patterns:
        if compile_pattern(pattern).search(subject):
            return pattern
    return None


def evaluate(
    branch_name: str,
    remote_tracking_exists: bool,
    config: Configuration,
) -> PolicyVerdict:
    """Evaluate the pre-push policy for *branch_name*. Pure apart from logging."""
    pre_push = config.pre_push
    if not pre_push.enabled:
        return PolicyVerdict.ALLOWED

    check_protected = (
        remote_tracking_exists or pre_push.enforce_protected_branches_on_non_existent_remote
    )
    if check_protected:
        matched = first_match(pre_push.protected_branches, branch_name)
        if matched is not None:
            logger.debug("Branch is protected", branch=branch_name, pattern=matched)
            return PolicyVerdict.BLOCKED_PROTECTED

    matched = first_match(pre_push.valid_branches, branch_name)
    if matched is None:
        logger.debug(
            "Branch name matches no valid pattern",
            branch=branch_name,
            patterns=list(pre_push.valid_branches),
        )
        return PolicyVerdict.BLOCKED_INVALID_NAME

    logger.debug("Branch allowed", branch=branch_name, pattern=matched)
    return PolicyVerdict.ALLOWED
