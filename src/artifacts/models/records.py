"""Prior-build record models.

The record maps each source identity to the fingerprint it had when it was
last compiled successfully, together with the compiler that compiled it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from artifacts.models.compiler import CompilerInfo


def _artifact_schema_version() -> int:
    from contract.artifacts import ARTIFACT_SCHEMA_VERSION

    return ARTIFACT_SCHEMA_VERSION


class RecordEntry(BaseModel):
    """Last-known state of a single compiled source."""

    fingerprint: str
    compiler: CompilerInfo | None = None


class BuildRecord(BaseModel):
    """Read-only snapshot of the previous build, keyed by source identity."""

    schema_version: int = Field(default_factory=_artifact_schema_version)
    entries: dict[str, RecordEntry] = Field(default_factory=dict)

    def get(self, identity: str) -> RecordEntry | None:
        return self.entries.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self.entries

    def __len__(self) -> int:
        return len(self.entries)


__all__ = ["BuildRecord", "RecordEntry"]
