"""On-disk artifact contract definitions.

Filenames written by rebuildmap into its output directory.
"""

from __future__ import annotations

# Schema version for records and compilation artifacts.
ARTIFACT_SCHEMA_VERSION = 1

BUILD_RECORD_JSON = "build_record.json"
COMPILATION_JSON = "compilation.json"
DEPS_EDGELIST = "deps.edgelist"
GRAPH_SUMMARY_JSON = "graph_summary.json"

__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "BUILD_RECORD_JSON",
    "COMPILATION_JSON",
    "DEPS_EDGELIST",
    "GRAPH_SUMMARY_JSON",
]
