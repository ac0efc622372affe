"""Request/response contract of the compiler backend boundary."""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, Field

from artifacts.models.compiler import CompilerInfo, CompilerSettings, Diagnostic


class DispatchRequest(BaseModel):
    """Everything the backend needs for one build pass, submitted as a unit."""

    sources: dict[str, str]
    targets: list[str] = Field(default_factory=list)
    remappings: dict[str, str] = Field(default_factory=dict)
    settings: CompilerSettings = Field(default_factory=CompilerSettings)


class RawArtifact(BaseModel):
    """One compiled unit as the backend reported it."""

    source_key: str
    name: str
    payload: dict[str, Any] = Field(default_factory=dict)


class DispatchResponse(BaseModel):
    """Backend output, keyed however the backend chose to key it."""

    compiler: CompilerInfo
    artifacts: list[RawArtifact] = Field(default_factory=list)
    source_ids: dict[str, int] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]


class CompilationDispatcher(Protocol):
    """Opaque compiler backend.

    Implementations raise ``DispatchFailure`` when the backend itself fails.
    """

    def dispatch(self, request: DispatchRequest) -> DispatchResponse: ...


__all__ = [
    "CompilationDispatcher",
    "DispatchRequest",
    "DispatchResponse",
    "RawArtifact",
]
