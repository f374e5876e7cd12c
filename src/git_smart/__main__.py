"""Entry point for `git-smart` / `python -m git_smart`.

Subcommands (each wired from the matching script in .git/hooks):
    git-smart setup [--header]
    git-smart pre-commit
    git-smart pre-push [<remote>] [<url>]
    git-smart prepare-commit-msg <path> [<type>] [<extra>]
    git-smart commit-msg <path> [<type>] [<extra>]
"""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from git_smart import hooks
from git_smart.config import CONFIG_FILE, load_config
from git_smart.errors import EXIT_OK, GitSmartError
from git_smart.logger import bind_hook, logger


def _version() -> str:
    try:
        return version("git-smart")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-smart",
        description="manage git expectations",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(CONFIG_FILE),
        help=f"Path to the policy file (default: {CONFIG_FILE})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="setup git hooks")
    setup.add_argument("--header", action="store_true", help="display the header")

    sub.add_parser("pre-commit", help="git pre-commit hook")

    pre_push = sub.add_parser("pre-push", help="git pre-push hook")
    pre_push.add_argument("remote", nargs="?", default="", help="Name of the remote")
    pre_push.add_argument("url", nargs="?", default="", help="URL of the remote (ignored)")

    # Arity is checked by the handlers so a missing path exits 1, not argparse's 2
    prepare = sub.add_parser("prepare-commit-msg", help="git prepare-commit-msg hook")
    prepare.add_argument("args", nargs="*", metavar="<path> [<type>] [<extra>]")

    commit = sub.add_parser("commit-msg", help="git commit-msg hook")
    commit.add_argument("args", nargs="*", metavar="<path> [<type>] [<extra>]")

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, load the policy file and run one hook. Returns the exit code."""
    args = build_parser().parse_args(argv)
    bind_hook(args.command)

    try:
        config = load_config(args.config)
        if config is None:
            print(f"{args.config} does not exist; gracefully exiting")
            return EXIT_OK

        match args.command:
            case "setup":
                hooks.setup(header=args.header)
            case "pre-commit":
                hooks.pre_commit(config)
            case "pre-push":
                hooks.pre_push(config, args.remote)
            case "prepare-commit-msg":
                hooks.prepare_commit_msg(config, args.args)
            case "commit-msg":
                hooks.commit_msg(config, args.args)
    except GitSmartError as exc:
        logger.info(
            "Hook failed",
            error=type(exc).__name__,
            exit_code=exc.exit_code,
        )
        print(exc, file=sys.stderr)
        return exc.exit_code

    return EXIT_OK


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
