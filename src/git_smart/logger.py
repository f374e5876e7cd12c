"""Logging for git-smart.

Hook output lands in the terminal of whoever ran the git command, so logs go
to stderr, default to WARNING and carry no timestamps. Records are tagged
with the hook being run (see :func:`bind_hook`), including the crash record
written by the excepthook.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

_DEFAULT_LEVEL = "WARNING"


def _level_from_env() -> int:
    level = logging.getLevelName(os.environ.get("GIT_SMART_LOG_LEVEL", _DEFAULT_LEVEL).upper())
    return level if isinstance(level, int) else logging.WARNING


def _setup_logging() -> structlog.stdlib.BoundLogger:
    # Own package logger only; the root logger belongs to whoever embeds us
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger = logging.getLogger("git_smart")
    stdlib_logger.handlers[:] = [handler]
    stdlib_logger.setLevel(_level_from_env())
    stdlib_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("git_smart")


logger = _setup_logging()


def bind_hook(name: str) -> None:
    """Tag every following record with the hook this process is running."""
    structlog.contextvars.bind_contextvars(hook=name)


def _uncaught_exception_handler(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_tb: object,
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)  # type: ignore[arg-type]
        return
    logger.critical("git-smart crashed", exc_info=(exc_type, exc_value, exc_tb))
    sys.exit(1)


sys.excepthook = _uncaught_exception_handler
