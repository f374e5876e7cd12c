"""Run pre-commit commands.

Each command's stdout and stderr are merged, echoed line by line to a stream
as they arrive, and buffered so the caller gets the full output back.
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from typing import IO, TextIO, cast

from git_smart.config import ExecuteConfig
from git_smart.errors import CommandFailedError
from git_smart.logger import logger


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(argv: Iterable[str], *, stream: TextIO | None = None) -> CommandResult:
    """Run *argv* to completion, forwarding combined output to *stream* if given.

    No timeout: a command that hangs blocks until it is killed. Raises OSError
    if the executable cannot be started.
    """
    argv = tuple(argv)
    chunks: list[str] = []
    with subprocess.Popen(
        argv,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    ) as proc:
        for line in cast(IO[str], proc.stdout):
            chunks.append(line)
            if stream is not None:
                stream.write(line)
                stream.flush()
        returncode = proc.wait()
    return CommandResult(argv=argv, returncode=returncode, output="".join(chunks))


def run_all(
    commands: Iterable[ExecuteConfig],
    *,
    stream: TextIO | None = None,
) -> list[CommandResult]:
    """Run *commands* in order, stopping at the first failure.

    Output goes to stdout unless another *stream* is given.
    Raises CommandFailedError for a non-zero exit or a command that cannot
    be started; the remaining commands are not run.
    """
    out = stream if stream is not None else sys.stdout
    results: list[CommandResult] = []
    for execute in commands:
        argv = (execute.command, *execute.arguments)
        logger.debug("Running pre-commit command", argv=list(argv))
        try:
            result = run_command(argv, stream=out)
        except OSError as exc:
            raise CommandFailedError(execute.command, None, str(exc)) from exc
        results.append(result)
        if not result.ok:
            logger.info(
                "Pre-commit command failed",
                argv=list(argv),
                returncode=result.returncode,
            )
            raise CommandFailedError(execute.command, result.returncode)
    return results
