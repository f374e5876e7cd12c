"""Error taxonomy for git-smart.

Every error carries the process exit code git should see. The CLI catches
``GitSmartError`` at the top level; nothing below it calls ``sys.exit``.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_COMMIT_MESSAGE_REJECTED = 100


class GitSmartError(Exception):
    """Base class for all expected git-smart failures."""

    exit_code: int = EXIT_FAILURE


class ConfigurationError(GitSmartError):
    """The policy file is unparseable or violates the schema."""


class RepositoryError(GitSmartError):
    """The working directory is not a git repo or HEAD cannot be resolved."""


class UsageError(GitSmartError):
    """A hook was invoked without its required positional arguments."""


class PolicyViolation(GitSmartError):
    """A push was blocked by the branch policy."""


class CommitMessageRejected(GitSmartError):
    """The commit message does not match the verification pattern."""

    exit_code = EXIT_COMMIT_MESSAGE_REJECTED


class CommandFailedError(GitSmartError):
    """A pre-commit command exited non-zero or could not be started."""

    def __init__(self, command: str, returncode: int | None, detail: str = "") -> None:
        self.command = command
        self.returncode = returncode
        if returncode is None:
            msg = f"pre-commit command {command!r} could not be started: {detail}"
        else:
            msg = f"pre-commit command {command!r} failed (exit {returncode})"
        super().__init__(msg)


class HookIOError(GitSmartError):
    """Reading or writing a file handed to us by git failed."""
