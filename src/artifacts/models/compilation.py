"""Per-module compilation result models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from artifacts.models.compiler import CompilerInfo, Diagnostic


def _artifact_schema_version() -> int:
    from contract.artifacts import ARTIFACT_SCHEMA_VERSION

    return ARTIFACT_SCHEMA_VERSION


class CompiledModule(BaseModel):
    """One compiled unit mapped back onto its source identity."""

    source: str
    name: str
    source_index: int
    is_target: bool
    artifact: dict[str, Any] = Field(default_factory=dict)


class CompilationResult(BaseModel):
    """Output of a single dispatch call, keyed back onto source identities."""

    schema_version: int = Field(default_factory=_artifact_schema_version)
    source_indexes: dict[str, int] = Field(default_factory=dict)
    contracts: list[CompiledModule] = Field(default_factory=list)
    compiler: CompilerInfo
    warnings: list[Diagnostic] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.contracts

    def by_module(self) -> dict[str, list[CompiledModule]]:
        grouped: dict[str, list[CompiledModule]] = {}
        for compiled in self.contracts:
            grouped.setdefault(compiled.source, []).append(compiled)
        return dict(sorted(grouped.items()))


__all__ = ["CompilationResult", "CompiledModule"]
