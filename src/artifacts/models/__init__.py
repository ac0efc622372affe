"""Model namespace for rebuildmap record and result schemas."""

from artifacts.models.compilation import CompilationResult, CompiledModule
from artifacts.models.compiler import (
    CompilerInfo,
    CompilerSettings,
    Diagnostic,
    OptimizerSettings,
)
from artifacts.models.graph import GraphSummary, UnresolvedRecord
from artifacts.models.records import BuildRecord, RecordEntry

__all__ = [
    "BuildRecord",
    "CompilationResult",
    "CompiledModule",
    "CompilerInfo",
    "CompilerSettings",
    "Diagnostic",
    "GraphSummary",
    "OptimizerSettings",
    "RecordEntry",
    "UnresolvedRecord",
]
