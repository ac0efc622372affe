"""Compile entry points."""

from pipeline.compile import (
    CompilationOutcome,
    compile_all,
    compile_necessary,
    compile_sources,
    compile_with_dependencies,
)

__all__ = [
    "CompilationOutcome",
    "compile_all",
    "compile_necessary",
    "compile_sources",
    "compile_with_dependencies",
]
