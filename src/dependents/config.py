"""Configuration settings for dependents."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003

from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    CliImplicitFlag,
    CliPositionalArg,
    SettingsConfigDict,
)

from .db import DEFAULT_DB_PATH


class Settings(BaseSettings):
    """Settings for dependents."""

    names: CliPositionalArg[list[str]] = Field(
        description="""Packages to show the dependents of. When given more
        than one package, show the packages that depend on all of them.""",
    )
    recursive: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Resolve more than one level of dependencies.""",
    )
    installed: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Only list packages that are currently installed.""",
    )
    include_build: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Include all packages that specify a target as a `build`
        type dependency.""",
    )
    include_test: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Include all packages that specify a target as a `test`
        type dependency.""",
    )
    include_optional: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Include all packages that specify a target as an
        `optional` type dependency.""",
    )
    skip_recommended: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Skip all packages that specify a target as a
        `recommended` type dependency.""",
    )
    tree: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Show dependents as a tree.""",
    )
    devel: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Deprecated: show usage by development builds.""",
    )
    HEAD: CliImplicitFlag[bool] = Field(  # noqa: N815
        default=False,
        description="""Deprecated: show usage by HEAD builds.""",
    )
    registry: Path | None = Field(
        default=None,
        description="""Read packages from this JSON registry file instead of
        the database.""",
    )
    load: Path | None = Field(
        default=None,
        description="""Import the packages of this JSON registry file into the
        database before querying.""",
    )
    database: Path = Field(
        default=DEFAULT_DB_PATH,
        description="""Alternative path of the package database, or ':memory:'
        to use a temporary in-memory database.""",
    )
    progress: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Show a progress bar while scanning packages.""",
    )
    log_level: str = Field(default="warning", description="Log level")

    model_config = SettingsConfigDict(
        env_prefix="DEPENDENTS_",
        cli_prog_name="dependents",
        cli_kebab_case=True,
    )

    @model_validator(mode="after")
    def check_conflicts(self) -> Settings:
        """Reject options that cannot be combined."""
        if self.devel and self.HEAD:
            msg = "Options --devel and --HEAD are mutually exclusive"
            raise ValueError(msg)
        if self.load is not None and self.registry is not None:
            msg = "Option --load imports into the database and can not be combined with --registry"
            raise ValueError(msg)
        return self
