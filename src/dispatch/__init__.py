"""Compiler backend boundary."""

from dispatch.base import (
    CompilationDispatcher,
    DispatchRequest,
    DispatchResponse,
    RawArtifact,
)
from dispatch.standard_json import (
    StandardJsonDispatcher,
    build_standard_json_input,
    parse_standard_json_output,
)

__all__ = [
    "CompilationDispatcher",
    "DispatchRequest",
    "DispatchResponse",
    "RawArtifact",
    "StandardJsonDispatcher",
    "build_standard_json_input",
    "parse_standard_json_output",
]
