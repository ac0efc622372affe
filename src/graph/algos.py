"""Graph algorithms over module dependency graphs.

Traversals are iterative with explicit visited sets so deep or cyclic
graphs cannot exhaust the interpreter stack.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence


def reachable(adjacency: Sequence[Sequence[int]], seeds: Iterable[int]) -> set[int]:
    """Return every node index reachable from ``seeds``, seeds included."""
    visited: set[int] = set()
    queue: deque[int] = deque()
    for seed in seeds:
        if seed not in visited:
            visited.add(seed)
            queue.append(seed)

    while queue:
        node = queue.popleft()
        for neighbor in adjacency[node]:
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    return visited


def compute_fan_stats(
    edges: Iterable[tuple[str, str]],
) -> tuple[dict[str, int], dict[str, int]]:
    """Compute fan-in and fan-out statistics from edges."""
    fan_in: dict[str, int] = {}
    fan_out: dict[str, int] = {}

    for source, target in edges:
        fan_out[source] = fan_out.get(source, 0) + 1
        fan_in[target] = fan_in.get(target, 0) + 1

    return fan_in, fan_out


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    """Extract a strongly connected component from the stack."""
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _visit(
    node: str,
    graph: dict[str, set[str]],
    state: _TarjanState,
    work: list[tuple[str, Iterator[str]]],
) -> None:
    state.indices[node] = state.index
    state.low_link[node] = state.index
    state.index += 1
    state.stack.append(node)
    state.on_stack.add(node)
    work.append((node, iter(sorted(graph.get(node, set())))))


def _strongconnect(root: str, graph: dict[str, set[str]], state: _TarjanState) -> None:
    """Run Tarjan's algorithm from ``root`` using an explicit work stack."""
    work: list[tuple[str, Iterator[str]]] = []
    _visit(root, graph, state, work)

    while work:
        node, neighbors = work[-1]
        descended = False
        for neighbor in neighbors:
            if neighbor not in state.indices:
                _visit(neighbor, graph, state, work)
                descended = True
                break
            if neighbor in state.on_stack:
                state.low_link[node] = min(state.low_link[node], state.indices[neighbor])
        if descended:
            continue

        work.pop()
        if work:
            parent = work[-1][0]
            state.low_link[parent] = min(state.low_link[parent], state.low_link[node])

        if state.low_link[node] == state.indices[node]:
            scc = _extract_scc(state, node)
            if len(scc) > 1 or node in graph.get(node, set()):
                state.sccs.append(scc)


def find_cycles(graph: dict[str, set[str]]) -> list[list[str]]:
    """Find cycles in a directed graph using Tarjan's algorithm.

    Self-imports count as cycles of length one.

    Returns:
        List of cycles, each sorted, the list itself sorted
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return sorted(sorted(scc) for scc in state.sccs)


__all__ = [
    "compute_fan_stats",
    "find_cycles",
    "reachable",
]
