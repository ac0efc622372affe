"""Module dependency graph built from scanned import references."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from contract.errors import UnresolvedImportError
from graph.algos import find_cycles, reachable
from utils import normalize_identity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from parse.references import Resolver
    from parse.scanner import ImportScanner

logger = logging.getLogger(__name__)

UnresolvedPolicy = Literal["warn", "error"]


@dataclass(frozen=True, order=True)
class UnresolvedImport:
    """A reference that could not be mapped onto a known module."""

    source: str
    reference: str
    resolved: str | None = None


class DependencyGraph:
    """Directed "imports" graph over module identities.

    Nodes are stored as integer indices into the sorted identity tuple, with
    forward and reverse adjacency lists. Edges only point at modules whose
    text is known; dangling references are kept in ``unresolved``.
    """

    def __init__(
        self,
        texts: Mapping[str, str],
        edges: Mapping[str, Iterable[str]],
        unresolved: Sequence[UnresolvedImport] = (),
        remappings: Mapping[str, str] | None = None,
    ) -> None:
        self._identities: tuple[str, ...] = tuple(sorted(texts))
        self._index = {identity: i for i, identity in enumerate(self._identities)}
        self._texts = {identity: texts[identity] for identity in self._identities}

        forward: list[set[int]] = [set() for _ in self._identities]
        backward: list[set[int]] = [set() for _ in self._identities]
        for source, targets in edges.items():
            source_index = self._index[source]
            for target in targets:
                target_index = self._index[target]
                forward[source_index].add(target_index)
                backward[target_index].add(source_index)

        self._forward = tuple(tuple(sorted(n)) for n in forward)
        self._backward = tuple(tuple(sorted(n)) for n in backward)
        self._unresolved = tuple(sorted(set(unresolved)))
        self._remappings = dict(sorted((remappings or {}).items()))

    @classmethod
    def build(
        cls,
        modules: Mapping[str, str],
        resolver: Resolver,
        *,
        scanner: ImportScanner,
        loader: Callable[[str], str | None] | None = None,
        unresolved: UnresolvedPolicy = "warn",
    ) -> DependencyGraph:
        """Scan every module and resolve its references into edges.

        When ``loader`` is given, a resolved identity that is not among
        ``modules`` is offered to it; returned text adds the module to the
        graph (and scans it in turn). References that stay unresolved are
        recorded and logged. With ``unresolved="error"`` they raise
        ``UnresolvedImportError`` once the whole graph has been scanned.
        """
        texts = {normalize_identity(identity): text for identity, text in modules.items()}
        edges: dict[str, set[str]] = {}
        missing: list[UnresolvedImport] = []
        remappings: dict[str, str] = {}

        pending: deque[str] = deque(sorted(texts))
        queued = set(pending)

        while pending:
            identity = pending.popleft()
            targets = edges.setdefault(identity, set())

            for reference in sorted(scanner.scan(texts[identity])):
                resolved = resolver(identity, reference)
                if resolved is not None:
                    resolved = normalize_identity(resolved)
                    if resolved not in texts and loader is not None:
                        text = loader(resolved)
                        if text is not None:
                            texts[resolved] = text

                if resolved is None or resolved not in texts:
                    missing.append(UnresolvedImport(identity, reference, resolved))
                    logger.warning(f"Unresolved import {reference!r} in {identity}")
                    continue

                targets.add(resolved)
                if not reference.startswith(".") and resolved != reference:
                    remappings.setdefault(reference, resolved)
                if resolved not in queued:
                    queued.add(resolved)
                    pending.append(resolved)

        if missing and unresolved == "error":
            raise UnresolvedImportError(sorted(set(missing)))

        logger.debug(
            f"Built dependency graph: {len(texts)} modules, "
            f"{sum(len(t) for t in edges.values())} edges, {len(missing)} unresolved"
        )
        return cls(texts, edges, missing, remappings)

    @property
    def identities(self) -> tuple[str, ...]:
        return self._identities

    @property
    def texts(self) -> dict[str, str]:
        return dict(self._texts)

    @property
    def unresolved(self) -> tuple[UnresolvedImport, ...]:
        return self._unresolved

    @property
    def remappings(self) -> dict[str, str]:
        """Non-relative references whose module lives under a different path."""
        return dict(self._remappings)

    def all_nodes(self) -> frozenset[str]:
        return frozenset(self._identities)

    def _indices(self, identities: Iterable[str]) -> list[int]:
        indices: list[int] = []
        for identity in identities:
            try:
                indices.append(self._index[identity])
            except KeyError:
                msg = f"Unknown module {identity!r}"
                raise KeyError(msg) from None
        return indices

    def _names(self, indices: Iterable[int]) -> frozenset[str]:
        return frozenset(self._identities[i] for i in indices)

    def imports_of(self, identity: str) -> frozenset[str]:
        (index,) = self._indices([identity])
        return self._names(self._forward[index])

    def importers_of(self, identity: str) -> frozenset[str]:
        (index,) = self._indices([identity])
        return self._names(self._backward[index])

    def reachable_from(self, seeds: Iterable[str]) -> frozenset[str]:
        """Forward transitive closure over import edges, seeds included."""
        return self._names(reachable(self._forward, self._indices(seeds)))

    def reverse_reachable_from(self, seeds: Iterable[str]) -> frozenset[str]:
        """Every module that transitively imports one of ``seeds``, seeds included."""
        return self._names(reachable(self._backward, self._indices(seeds)))

    def edges(self) -> list[tuple[str, str]]:
        return [
            (self._identities[source], self._identities[target])
            for source, targets in enumerate(self._forward)
            for target in targets
        ]

    def adjacency(self) -> dict[str, set[str]]:
        return {
            identity: {self._identities[t] for t in self._forward[i]}
            for i, identity in enumerate(self._identities)
        }

    def cycles(self) -> list[list[str]]:
        return find_cycles(self.adjacency())

    def unresolved_sources(self) -> frozenset[str]:
        return frozenset(item.source for item in self._unresolved)

    def __contains__(self, identity: object) -> bool:
        return identity in self._index

    def __len__(self) -> int:
        return len(self._identities)


__all__ = ["DependencyGraph", "UnresolvedImport", "UnresolvedPolicy"]
