"""Stable caller-facing contract surface for rebuildmap.

Artifact filenames, error kinds and the record/result models that build
tools exchange with the resolution core.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    BUILD_RECORD_JSON,
    COMPILATION_JSON,
    DEPS_EDGELIST,
    GRAPH_SUMMARY_JSON,
)
from contract.errors import (
    DispatchFailure,
    MissingExplicitSourceError,
    MissingSourceError,
    RebuildError,
    RecordError,
    ResultAssemblyError,
    StoreFrozenError,
    UnresolvedImportError,
)


def __getattr__(name: str) -> object:
    if name in {
        "BuildRecord",
        "CompilationResult",
        "CompiledModule",
        "CompilerInfo",
        "CompilerSettings",
        "Diagnostic",
        "RecordEntry",
    }:
        from contract import models

        return getattr(models, name)

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "BUILD_RECORD_JSON",
    "COMPILATION_JSON",
    "DEPS_EDGELIST",
    "GRAPH_SUMMARY_JSON",
    "BuildRecord",
    "CompilationResult",
    "CompiledModule",
    "CompilerInfo",
    "CompilerSettings",
    "Diagnostic",
    "DispatchFailure",
    "MissingExplicitSourceError",
    "MissingSourceError",
    "RebuildError",
    "RecordEntry",
    "RecordError",
    "ResultAssemblyError",
    "StoreFrozenError",
    "UnresolvedImportError",
]
