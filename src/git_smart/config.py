"""Policy file models and loader.

The policy lives in ``.git-smart.yaml`` at the root of the working tree. Each
YAML section maps to a pydantic sub-model. Keys are camelCase in YAML and
snake_case in Python.

Usage::

    from git_smart.config import load_config

    config = load_config(Path(".git-smart.yaml"))
    if config is None:
        ...  # no policy file, every hook is a no-op
    print(config.pre_push.protected_branches)
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from git_smart.errors import ConfigurationError
from git_smart.logger import logger

CONFIG_FILE = ".git-smart.yaml"


def _check_pattern(pattern: str) -> str:
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
    return pattern


# ---------------------------------------------------------------------------
# Sub-models (each maps to a section in .git-smart.yaml)
# ---------------------------------------------------------------------------


class _StrictModel(BaseModel):
    """Base for all config sub-models — reject unknown keys so typos fail loudly."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # `key:` with no value parses as None; treat it as unset
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class CommitVerificationConfig(_StrictModel):
    enabled: bool = False
    verification_regex: str = Field(default="", alias="verificationRegEx")

    @field_validator("verification_regex")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        return _check_pattern(v)


class CommitMessageConfig(_StrictModel):
    """``commitMessage`` — one entry per commit type."""

    commit: CommitVerificationConfig = CommitVerificationConfig()


class CommitTemplateConfig(_StrictModel):
    enabled: bool = False
    template: str = ""


class PrepareCommitMessageConfig(_StrictModel):
    """``prepareCommitMessage`` — one entry per commit type."""

    commit: CommitTemplateConfig = CommitTemplateConfig()


class PrePushConfig(_StrictModel):
    enabled: bool = False
    enforce_protected_branches_on_non_existent_remote: bool = False
    protected_branches: tuple[str, ...] = ()  # unanchored, first match blocks
    valid_branches: tuple[str, ...] = ()  # empty → no branch is ever valid

    @field_validator("protected_branches", "valid_branches")
    @classmethod
    def validate_patterns(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in v:
            _check_pattern(pattern)
        return v


class ExecuteConfig(_StrictModel):
    command: str
    arguments: tuple[str, ...] = ()

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command cannot be empty")
        return v


class PreCommitConfig(_StrictModel):
    enabled: bool = False
    execute: tuple[ExecuteConfig, ...] = ()  # run in order, stop at first failure


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class Configuration(_StrictModel):
    commit_message: CommitMessageConfig = CommitMessageConfig()
    prepare_commit_message: PrepareCommitMessageConfig = PrepareCommitMessageConfig()
    pre_push: PrePushConfig = PrePushConfig()
    pre_commit: PreCommitConfig = PreCommitConfig()


def _format_validation_error(exc: ValidationError) -> str:
    lines = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        lines.append(f"  - {location}: {err['msg']}")
    return "\n".join(lines)


def parse_config(text: str, source: str = CONFIG_FILE) -> Configuration:
    """Parse and validate a YAML policy document.

    An empty document is a valid configuration with every hook disabled.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"{source} is not valid YAML: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"{source} must contain a mapping at the top level, got {type(raw).__name__}"
        )

    try:
        return Configuration.model_validate(raw)
    except ValidationError as exc:
        msg = f"{source} is invalid:\n{_format_validation_error(exc)}"
        raise ConfigurationError(msg) from exc


def load_config(path: Path | None = None) -> Configuration | None:
    """Read the policy file, returning None if it does not exist."""
    path = path or Path(CONFIG_FILE)
    if not path.exists():
        logger.debug("Policy file not found", path=str(path))
        return None

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"cannot read {path}: {exc}") from exc

    config = parse_config(text, source=str(path))
    logger.debug("Policy file loaded", path=str(path))
    return config
