"""Compilation result assembly."""

from assemble.assembler import ResultAssembler

__all__ = ["ResultAssembler"]
