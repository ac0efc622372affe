"""Module text storage for a single build pass."""

from store.modules import (
    FileSystemReader,
    MappingReader,
    Module,
    ModuleStore,
    SourceReader,
)

__all__ = [
    "FileSystemReader",
    "MappingReader",
    "Module",
    "ModuleStore",
    "SourceReader",
]
