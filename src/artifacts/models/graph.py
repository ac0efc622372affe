"""Dependency graph summary model."""

from __future__ import annotations

from pydantic import BaseModel, Field


def _artifact_schema_version() -> int:
    from contract.artifacts import ARTIFACT_SCHEMA_VERSION

    return ARTIFACT_SCHEMA_VERSION


class UnresolvedRecord(BaseModel):
    """An import reference that did not resolve to a known module."""

    source: str
    reference: str
    resolved: str | None = None


class GraphSummary(BaseModel):
    """Summary of dependency graph metrics."""

    schema_version: int = Field(default_factory=_artifact_schema_version)
    node_count: int
    edge_count: int
    cycles: list[list[str]] = Field(default_factory=list)
    fan_in: dict[str, int] = Field(default_factory=dict)
    fan_out: dict[str, int] = Field(default_factory=dict)
    top_modules: list[str] = Field(default_factory=list)
    unresolved: list[UnresolvedRecord] = Field(default_factory=list)


__all__ = ["GraphSummary", "UnresolvedRecord"]
