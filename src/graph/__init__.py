"""Dependency graph construction and traversal."""

from graph.algos import compute_fan_stats, find_cycles, reachable
from graph.dependency import DependencyGraph, UnresolvedImport, UnresolvedPolicy

__all__ = [
    "DependencyGraph",
    "UnresolvedImport",
    "UnresolvedPolicy",
    "compute_fan_stats",
    "find_cycles",
    "reachable",
]
