"""Compiler identity, settings and diagnostic models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["error", "warning", "info"]


class CompilerInfo(BaseModel):
    """Name and version of the compiler that produced an artifact."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str


class OptimizerSettings(BaseModel):
    """Optimizer flags forwarded to the compiler backend."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    runs: int = Field(default=200, ge=0)


class CompilerSettings(BaseModel):
    """Normalized configuration handed to the compiler backend."""

    model_config = ConfigDict(extra="forbid")

    command: list[str] = Field(
        default_factory=lambda: ["solc", "--standard-json"],
        description="Command that accepts standard-JSON input on stdin",
    )
    version: str | None = Field(
        default=None,
        description="Compiler version constraint, passed through to the backend",
    )
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    output_selection: list[str] = Field(
        default_factory=lambda: ["abi", "evm.bytecode.object"],
        description="Outputs requested from the backend for every target",
    )
    strict: bool = Field(
        default=False,
        description="Treat compiler warnings as errors",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the backend before giving up",
    )


class Diagnostic(BaseModel):
    """A warning or error reported by the backend, with optional location."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    source_key: str | None = None
    start: int | None = None
    end: int | None = None

    def location(self) -> str:
        if self.source_key is None:
            return "<unknown>"
        if self.start is None:
            return self.source_key
        return f"{self.source_key}:{self.start}"


__all__ = [
    "CompilerInfo",
    "CompilerSettings",
    "Diagnostic",
    "OptimizerSettings",
    "Severity",
]
