"""Persisted build records and written artifacts."""

from artifacts.build_record import (
    load_build_record,
    update_build_record,
    write_build_record,
)
from artifacts.write import summarize_graph, write_compilation, write_graph

__all__ = [
    "load_build_record",
    "summarize_graph",
    "update_build_record",
    "write_build_record",
    "write_compilation",
    "write_graph",
]
