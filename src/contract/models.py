"""Record and result models exposed at the caller boundary."""

from artifacts.models.compilation import CompilationResult, CompiledModule
from artifacts.models.compiler import CompilerInfo, CompilerSettings, Diagnostic
from artifacts.models.records import BuildRecord, RecordEntry

__all__ = [
    "BuildRecord",
    "CompilationResult",
    "CompiledModule",
    "CompilerInfo",
    "CompilerSettings",
    "Diagnostic",
    "RecordEntry",
]
