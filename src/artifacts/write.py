"""Write graph and compilation artifacts into the output directory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.models.graph import GraphSummary, UnresolvedRecord
from artifacts.utils import _write_json, _write_lines
from contract.artifacts import COMPILATION_JSON, DEPS_EDGELIST, GRAPH_SUMMARY_JSON
from graph.algos import compute_fan_stats

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.compilation import CompilationResult
    from graph.dependency import DependencyGraph


def summarize_graph(graph: DependencyGraph, *, top_n: int = 10) -> GraphSummary:
    """Compute node/edge counts, cycles, fan statistics and unresolved imports."""
    edges = graph.edges()
    fan_in, fan_out = compute_fan_stats(edges)
    top_modules = sorted(fan_in.keys(), key=lambda m: (-fan_in[m], m))[:top_n]

    return GraphSummary(
        node_count=len(graph),
        edge_count=len(edges),
        cycles=graph.cycles(),
        fan_in=dict(sorted(fan_in.items())),
        fan_out=dict(sorted(fan_out.items())),
        top_modules=top_modules,
        unresolved=[
            UnresolvedRecord(
                source=item.source,
                reference=item.reference,
                resolved=item.resolved,
            )
            for item in graph.unresolved
        ],
    )


def write_graph(out_dir: Path, graph: DependencyGraph, *, top_n: int = 10) -> GraphSummary:
    """Write ``deps.edgelist`` and ``graph_summary.json``."""
    out_dir.mkdir(parents=True, exist_ok=True)
    _write_lines(
        out_dir / DEPS_EDGELIST,
        (f"{source} -> {target}" for source, target in graph.edges()),
    )
    summary = summarize_graph(graph, top_n=top_n)
    _write_json(out_dir / GRAPH_SUMMARY_JSON, summary)
    return summary


def write_compilation(out_dir: Path, result: CompilationResult) -> Path:
    path = out_dir / COMPILATION_JSON
    _write_json(path, result)
    return path


__all__ = ["summarize_graph", "write_compilation", "write_graph"]
