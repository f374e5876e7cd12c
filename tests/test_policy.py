"""Tests for the pre-push branch policy.

evaluate() decides whether a push goes through, so ordering (protected before
valid, first match wins) and the unanchored matching rules are pinned here.
"""

from __future__ import annotations

import pytest
from conftest import make_config

from git_smart.config import PrePushConfig
from git_smart.errors import ConfigurationError
from git_smart.policy import PolicyVerdict, evaluate, first_match


def _config(**pre_push):
    pre_push.setdefault("enabled", True)
    return make_config(pre_push=PrePushConfig(**pre_push))


class TestDisabled:
    @pytest.mark.parametrize("tracked", [True, False])
    def test_disabled_always_allows(self, tracked):
        config = _config(enabled=False, protected_branches=[".*"], valid_branches=[])
        assert evaluate("main", tracked, config) is PolicyVerdict.ALLOWED


class TestProtectedBranches:
    def test_protected_branch_with_remote_tracking_is_blocked(self):
        config = _config(protected_branches=["^main$"], valid_branches=[".*"])
        assert evaluate("main", True, config) is PolicyVerdict.BLOCKED_PROTECTED

    def test_other_branch_is_allowed(self):
        config = _config(protected_branches=["^main$"], valid_branches=[".*"])
        assert evaluate("feature/x", True, config) is PolicyVerdict.ALLOWED

    def test_not_checked_without_remote_tracking(self):
        config = _config(protected_branches=["^main$"], valid_branches=[".*"])
        assert evaluate("main", False, config) is PolicyVerdict.ALLOWED

    def test_enforced_without_remote_when_configured(self):
        config = _config(
            enforce_protected_branches_on_non_existent_remote=True,
            protected_branches=["^main$"],
            valid_branches=[".*"],
        )
        assert evaluate("main", False, config) is PolicyVerdict.BLOCKED_PROTECTED

    def test_protected_short_circuits_valid_check(self):
        # Name is valid too; protected still wins
        config = _config(protected_branches=["^release/"], valid_branches=["^release/"])
        assert evaluate("release/1.0", True, config) is PolicyVerdict.BLOCKED_PROTECTED

    def test_patterns_are_unanchored(self):
        config = _config(protected_branches=["main"], valid_branches=[".*"])
        assert evaluate("not-main-really", True, config) is PolicyVerdict.BLOCKED_PROTECTED

    def test_whole_name_is_the_subject(self):
        config = _config(protected_branches=["^hotfix/urgent$"], valid_branches=[".*"])
        assert evaluate("hotfix/urgent", True, config) is PolicyVerdict.BLOCKED_PROTECTED


class TestValidBranches:
    def test_invalid_name_is_blocked(self):
        config = _config(valid_branches=["^feature/"])
        assert evaluate("bugfix/y", False, config) is PolicyVerdict.BLOCKED_INVALID_NAME

    def test_any_valid_pattern_allows(self):
        config = _config(valid_branches=["^feature/", "^bugfix/"])
        assert evaluate("bugfix/y", False, config) is PolicyVerdict.ALLOWED

    @pytest.mark.parametrize("branch", ["main", "feature/x", ""])
    def test_empty_valid_list_never_allows(self, branch):
        config = _config(valid_branches=[])
        assert evaluate(branch, True, config) is PolicyVerdict.BLOCKED_INVALID_NAME

    def test_unprotected_but_invalid_is_blocked(self):
        config = _config(protected_branches=["^main$"], valid_branches=["^feature/"])
        assert evaluate("wip", True, config) is PolicyVerdict.BLOCKED_INVALID_NAME


class TestInvalidPatterns:
    """Patterns normally fail at load time; evaluate() still refuses bad ones."""

    def _unvalidated(self, **pre_push):
        return make_config(pre_push=PrePushConfig.model_construct(enabled=True, **pre_push))

    def test_bad_protected_pattern_is_configuration_error(self):
        config = self._unvalidated(
            enforce_protected_branches_on_non_existent_remote=True,
            protected_branches=("(",),
            valid_branches=(".*",),
        )
        with pytest.raises(ConfigurationError):
            evaluate("main", False, config)

    def test_bad_valid_pattern_is_configuration_error(self):
        config = self._unvalidated(
            enforce_protected_branches_on_non_existent_remote=False,
            protected_branches=(),
            valid_branches=("[",),
        )
        with pytest.raises(ConfigurationError):
            evaluate("main", False, config)


class TestVerdict:
    def test_messages(self):
        assert PolicyVerdict.ALLOWED.message is None
        assert PolicyVerdict.BLOCKED_PROTECTED.message == "Current branch is protected"
        assert "naming requirements" in PolicyVerdict.BLOCKED_INVALID_NAME.message

    def test_first_match_respects_order(self):
        assert first_match(["feat", "feature/"], "feature/x") == "feat"
        assert first_match(["nope"], "feature/x") is None
