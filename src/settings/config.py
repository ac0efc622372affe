from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artifacts.models.compiler import CompilerSettings
from contract.artifacts import BUILD_RECORD_JSON
from parse.scanner import SCANNERS

CONFIG_FILENAME = "rebuildmap.toml"

Language = Literal["solidity", "python"]
UnresolvedBehavior = Literal["warn", "error"]


class RebuildConfig(BaseModel):
    """Configuration for incremental target resolution and compilation."""

    model_config = ConfigDict(extra="forbid")

    language: Language = Field(
        default="solidity",
        description="Source language; selects the import scanner and resolver",
    )
    sources_dir: str = Field(
        default="contracts",
        description="Directory searched for sources, relative to the root",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all sources)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    search_paths: list[str] = Field(
        default_factory=lambda: ["", "node_modules"],
        description="Roots tried in order for non-relative import references",
    )
    output_dir: str = Field(
        default=".rebuildmap",
        description="Output directory for the build record and artifacts",
    )
    record_file: str = Field(
        default=BUILD_RECORD_JSON,
        description="Build record filename inside the output directory",
    )
    unresolved: UnresolvedBehavior = Field(
        default="warn",
        description="Whether unresolved imports warn or abort the build",
    )
    unresolved_is_stale: bool = Field(
        default=False,
        description="Recompile modules with unresolved imports on every build",
    )
    compare_compiler_version: bool = Field(
        default=False,
        description="Treat a compiler change since the last build as staleness",
    )
    hidden_prefixes: list[str] = Field(
        default_factory=list,
        description="Identity prefixes left out of the sources-to-compile listing",
    )
    quiet: bool = Field(default=False, description="Suppress the listing")
    compiler: CompilerSettings = Field(default_factory=CompilerSettings)

    @field_validator("language", mode="before")
    @classmethod
    def validate_language(cls, v: Any) -> Any:
        if isinstance(v, str) and v not in SCANNERS:
            msg = (
                f"Unsupported language '{v}'. "
                f"Valid languages: {', '.join(sorted(SCANNERS))}"
            )
            raise ValueError(msg)
        return v

    @field_validator("record_file")
    @classmethod
    def validate_record_file(cls, v: str) -> str:
        if not v or v in {".", ".."} or "/" in v or "\\" in v:
            msg = f"record_file must be a plain filename, got '{v}'"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_within_root(root: Path, relative: str, *, field: str) -> Path:
    """Resolve a config-provided directory safely within the repo root.

    The value must be a non-empty relative path that remains within the
    repository root after resolution. Absolute paths and paths that escape
    the root are rejected.
    """
    if not relative:
        msg = f"{field} must be a non-empty relative path"
        raise ConfigError(msg)

    if relative.startswith("~"):
        msg = f"{field} must be a relative path within the repo root"
        raise ConfigError(msg)

    relative_path = Path(relative)
    if relative_path.is_absolute():
        msg = f"{field} must be a relative path within the repo root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved = (resolved_root / relative_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve {field} '{relative}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"{field} '{relative}' escapes the repository root"
        raise ConfigError(msg) from exc

    return resolved


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    return resolve_within_root(root, output_dir, field="output_dir")


def resolve_sources_dir(root: Path, sources_dir: str) -> Path:
    return resolve_within_root(root, sources_dir, field="sources_dir")


def resolve_record_path(root: Path, config: RebuildConfig) -> Path:
    return resolve_output_dir(root, config.output_dir) / config.record_file


def load_config(root: Path) -> RebuildConfig:
    """Load configuration from rebuildmap.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return RebuildConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return RebuildConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
