"""Hook handlers — one function per git hook.

Each handler takes the loaded :class:`Configuration` explicitly, performs the
hook's side effects and returns normally on success or no-op. Failures raise
a :class:`GitSmartError` subclass whose ``exit_code`` is what git sees.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from git_smart.config import CommitTemplateConfig, CommitVerificationConfig, Configuration
from git_smart.errors import CommitMessageRejected, HookIOError, PolicyViolation, UsageError
from git_smart.git_ops import current_branch, remote_tracking_exists
from git_smart.logger import logger
from git_smart.policy import PolicyVerdict, compile_pattern, evaluate
from git_smart.runner import run_all

CODE_NAME = "agent-86"

# prepare-commit-msg and commit-msg: <path> [<type>] [<extra>]
_MAX_MESSAGE_HOOK_ARGS = 3


class CommitType(enum.Enum):
    """Commit sources we have policy for.

    Git passes the source as the second hook argument (``message``,
    ``template``, ``merge``, ``squash``, ``commit``). Each member resolves its
    own entry in the ``commitMessage`` / ``prepareCommitMessage`` sections.
    """

    COMMIT = "commit"

    @classmethod
    def parse(cls, value: str) -> CommitType | None:
        try:
            return cls(value)
        except ValueError:
            return None

    def template_config(self, config: Configuration) -> CommitTemplateConfig:
        return getattr(config.prepare_commit_message, self.value)

    def verification_config(self, config: Configuration) -> CommitVerificationConfig:
        return getattr(config.commit_message, self.value)


def _split_message_args(args: Sequence[str], missing: str) -> tuple[Path, str]:
    """Return (path, commit type) from ``<path> [<type>] [<extra>]``."""
    if not 1 <= len(args) <= _MAX_MESSAGE_HOOK_ARGS:
        raise UsageError(missing)
    commit_type = args[1] if len(args) > 1 else CommitType.COMMIT.value
    return Path(args[0]), commit_type


# ---------------------------------------------------------------------------
# pre-commit
# ---------------------------------------------------------------------------


def pre_commit(config: Configuration, *, stream: TextIO | None = None) -> None:
    if not config.pre_commit.enabled:
        return
    run_all(config.pre_commit.execute, stream=stream)


# ---------------------------------------------------------------------------
# pre-push
# ---------------------------------------------------------------------------


def pre_push(
    config: Configuration,
    remote: str = "",
    *,
    repo_path: Path | None = None,
) -> PolicyVerdict:
    """Enforce the branch policy for the branch HEAD points at.

    An empty *remote* means there is no remote context, so the branch is
    treated as not yet existing on the remote. Detached HEAD is allowed.
    Raises PolicyViolation when the push is blocked.
    """
    if not config.pre_push.enabled:
        return PolicyVerdict.ALLOWED

    repo_path = repo_path or Path.cwd()
    head = current_branch(repo_path)
    if not head.is_branch:
        logger.debug("HEAD is not a branch, skipping pre-push policy", head=head.name)
        return PolicyVerdict.ALLOWED

    branch = head.short_name
    tracked = remote_tracking_exists(repo_path, remote, branch)
    verdict = evaluate(branch, tracked, config)
    logger.debug(
        "Pre-push policy evaluated",
        branch=branch,
        remote=remote,
        remote_tracking=tracked,
        verdict=verdict.value,
    )
    if not verdict.allowed:
        raise PolicyViolation(verdict.message)
    return verdict


# ---------------------------------------------------------------------------
# prepare-commit-msg
# ---------------------------------------------------------------------------


def prepare_commit_msg(config: Configuration, args: Sequence[str]) -> Path | None:
    """Write the configured template to the message file git hands us.

    Returns the path written, or None when there was nothing to do.
    """
    path, raw_type = _split_message_args(args, "No commit template referenced")
    commit_type = CommitType.parse(raw_type)
    if commit_type is None:
        logger.debug("No template for commit type", commit_type=raw_type)
        return None

    entry = commit_type.template_config(config)
    if not entry.enabled:
        return None

    try:
        path.write_text(entry.template, encoding="utf-8")
    except OSError as exc:
        raise HookIOError(str(exc)) from exc
    print(f"Template written to {path}")
    return path


# ---------------------------------------------------------------------------
# commit-msg
# ---------------------------------------------------------------------------


def commit_msg(config: Configuration, args: Sequence[str]) -> None:
    """Reject the commit when its message does not match the configured pattern."""
    path, raw_type = _split_message_args(args, "No commit message referenced")
    commit_type = CommitType.parse(raw_type)
    if commit_type is None:
        logger.debug("No verification for commit type", commit_type=raw_type)
        return

    entry = commit_type.verification_config(config)
    if not entry.enabled:
        return

    # git does not require UTF-8 messages (i18n.commitEncoding)
    try:
        message = path.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        raise HookIOError(str(exc)) from exc

    if compile_pattern(entry.verification_regex).search(message) is None:
        logger.debug("Commit message rejected", pattern=entry.verification_regex)
        raise CommitMessageRejected("Commit message does not match required regular expression")


# ---------------------------------------------------------------------------
# setup
# ---------------------------------------------------------------------------


def render_header(code_name: str = CODE_NAME, *, stream: TextIO | None = None) -> None:
    """Print the tool banner. Colour is used only when *stream* is a terminal."""
    console = Console(file=stream, highlight=False)
    title = Text("git smart", style="bold blue", justify="center")
    console.print(Panel(title, border_style="blue", expand=False, padding=(0, 4)))
    console.print(Text(f"  {code_name}", style="bold green"))
    console.print()


def setup(*, header: bool = False) -> None:
    if header:
        render_header()
    print("This is where we would setup the git hooks")
