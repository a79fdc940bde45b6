"""Configuration models for nextsv.

Configuration lives in the ``[tool.nextsv]`` table of ``pyproject.toml``::

    [tool.nextsv]
    prefix = "v"
    required_files = ["CHANGELOG.md"]
    enforce_level = "feature"
    check_level = "fix"

    [tool.nextsv.commits]
    types_feature = ["feat"]
    types_fix = ["fix", "revert"]

Every option can be overridden from the command line.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nextsv.core.bump import ForceDirective, ForceLevel
from nextsv.core.commits import DEFAULT_BREAKING_PATTERN
from nextsv.core.level import ChangeLevel


class CommitsConfig(BaseModel):
    """How commit types map onto change levels.

    Types not listed in either list count as ``other``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    types_feature: list[str] = Field(default_factory=lambda: ["feat"])
    types_fix: list[str] = Field(default_factory=lambda: ["fix", "revert"])
    breaking_pattern: str = DEFAULT_BREAKING_PATTERN

    @field_validator("types_feature", "types_fix")
    @classmethod
    def _lowercase_types(cls, value: list[str]) -> list[str]:
        return [commit_type.strip().lower() for commit_type in value]


class NextsvConfig(BaseModel):
    """Root configuration for a calculation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    prefix: str = "v"
    force: ForceLevel | None = None
    first: bool = False
    required_files: list[str] = Field(default_factory=list)
    enforce_level: ChangeLevel = ChangeLevel.FEATURE
    check_level: ChangeLevel | None = None
    scope: str | None = None
    commits: CommitsConfig = Field(default_factory=CommitsConfig)

    @field_validator("enforce_level", "check_level", mode="before")
    @classmethod
    def _parse_level(cls, value: object) -> object:
        if value is None or isinstance(value, ChangeLevel):
            return value
        if isinstance(value, str):
            level = ChangeLevel.parse(value)
        elif isinstance(value, int):
            level = ChangeLevel(value)
        else:
            return value
        if level is ChangeLevel.NONE:
            raise ValueError("a policy level must be other, fix, feature or breaking")
        return level

    @field_validator("force", mode="before")
    @classmethod
    def _parse_force(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return "first" if value == "1.0.0" else value
        return value

    @field_validator("required_files")
    @classmethod
    def _normalise_paths(cls, value: list[str]) -> list[str]:
        return sorted({path.strip().removeprefix("./") for path in value if path.strip()})

    @field_validator("scope")
    @classmethod
    def _normalise_scope(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().removeprefix("./").strip("/") or None

    @model_validator(mode="after")
    def _check_first(self) -> NextsvConfig:
        if self.first and (self.force is None or self.force.pre_release_label is None):
            raise ValueError("first requires force to be rc, beta or alpha")
        return self

    @property
    def force_directive(self) -> ForceDirective | None:
        """The forced transition, if one is configured."""
        if self.force is None:
            return None
        return ForceDirective(self.force, as_first=self.first)
