"""Incremental compilation targeting.

Given explicitly requested paths, auto-discovered paths and the prior build
record, work out which modules have to be recompiled and which modules the
compiler must see alongside them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contract.errors import MissingExplicitSourceError, MissingSourceError
from graph.dependency import DependencyGraph, UnresolvedImport, UnresolvedPolicy
from staleness.oracle import StaleReason, StalenessOracle
from utils import normalize_identity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from artifacts.models.records import BuildRecord
    from parse.references import Resolver
    from parse.scanner import ImportScanner
    from store.modules import ModuleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetSet:
    """Outcome of one resolution pass.

    ``compilation_targets`` is always a subset of ``all_sources`` and
    ``all_sources`` is exactly the import closure of the targets.
    ``remappings`` maps references written differently from the identity
    they resolved to, for backends that resolve imports themselves.
    """

    all_sources: dict[str, str]
    compilation_targets: tuple[str, ...]
    stale: dict[str, StaleReason] = field(default_factory=dict)
    unresolved: tuple[UnresolvedImport, ...] = ()
    explicit: frozenset[str] = frozenset()
    fingerprints: dict[str, str] = field(default_factory=dict)
    remappings: dict[str, str] = field(default_factory=dict)

    @property
    def needs_compilation(self) -> bool:
        return bool(self.compilation_targets)

    @classmethod
    def empty(cls) -> TargetSet:
        return cls(all_sources={}, compilation_targets=())


def _normalize_all(paths: Iterable[str]) -> set[str]:
    return {normalize_identity(path) for path in paths}


class TargetResolver:
    """Compute the submission closure and compilation targets for a build.

    Staleness is inherited: a module is affected when it is stale itself or
    when anything it transitively imports is stale. Affected modules are found
    by reverse reachability from the stale set, which is linear in the size of
    the graph.
    """

    def __init__(
        self,
        store: ModuleStore,
        *,
        scanner: ImportScanner,
        oracle: StalenessOracle | None = None,
        unresolved: UnresolvedPolicy = "warn",
        unresolved_is_stale: bool = False,
        max_workers: int | None = None,
    ) -> None:
        self.store = store
        self.scanner = scanner
        self.oracle = oracle or StalenessOracle()
        self.unresolved = unresolved
        self.unresolved_is_stale = unresolved_is_stale
        self.max_workers = max_workers

    def _load_text(self, identity: str) -> str | None:
        module = self.store.try_load(identity)
        return module.text if module is not None else None

    def _load_candidates(self, explicit: set[str], discovered: set[str]) -> set[str]:
        try:
            self.store.load_many(explicit, max_workers=self.max_workers)
        except MissingSourceError as exc:
            raise MissingExplicitSourceError(exc.identities) from exc

        candidates = set(explicit)
        loaded = self.store.try_load_many(discovered - explicit, max_workers=self.max_workers)
        for identity, module in loaded.items():
            if module is None:
                logger.warning(f"Skipping discovered source without content: {identity}")
                continue
            candidates.add(identity)
        return candidates

    def _stale_modules(
        self,
        graph: DependencyGraph,
        prior_record: BuildRecord,
    ) -> dict[str, StaleReason]:
        fingerprints = self.store.fingerprints()
        with_unresolved = graph.unresolved_sources() if self.unresolved_is_stale else frozenset()

        stale: dict[str, StaleReason] = {}
        for identity in graph.identities:
            reason = self.oracle.reason(identity, fingerprints[identity], prior_record)
            if reason is None and identity in with_unresolved:
                reason = StaleReason.UNRESOLVED_IMPORT
            if reason is not None:
                stale[identity] = reason
        return stale

    def build_graph(self, candidates: Iterable[str], resolver: Resolver) -> DependencyGraph:
        """Build the dependency graph over every module the store knows about.

        ``candidates`` must already be loaded; resolved references outside the
        store are loaded on demand.
        """
        for identity in candidates:
            self.store.load(identity)
        return DependencyGraph.build(
            self.store.texts(),
            resolver,
            scanner=self.scanner,
            loader=self._load_text,
            unresolved=self.unresolved,
        )

    def resolve(
        self,
        explicit_paths: Iterable[str],
        discovered_paths: Iterable[str],
        prior_record: BuildRecord,
        resolver: Resolver,
        *,
        compile_all: bool = False,
    ) -> TargetSet:
        """Resolve the modules to submit and the modules to target.

        Raises:
            MissingExplicitSourceError: An explicit path has no content.
            UnresolvedImportError: Unresolved imports with policy ``"error"``.
        """
        explicit = _normalize_all(explicit_paths)
        discovered = _normalize_all(discovered_paths)

        candidates = self._load_candidates(explicit, discovered)
        self.store.freeze()

        graph = self.build_graph(candidates, resolver)

        stale = self._stale_modules(graph, prior_record)
        affected = graph.reverse_reachable_from(stale) if stale else frozenset()
        for identity in sorted(affected - stale.keys()):
            stale[identity] = StaleReason.DEPENDENCY_CHANGED

        targets = set(candidates) if compile_all else affected & candidates
        closure = graph.reachable_from(targets)

        texts = graph.texts
        fingerprints = self.store.fingerprints()
        all_sources = {identity: texts[identity] for identity in sorted(closure)}

        logger.info(
            f"Resolved {len(targets)} compilation target(s) from "
            f"{len(candidates)} candidate(s); {len(stale)} affected, "
            f"{len(all_sources)} source(s) in closure"
        )

        return TargetSet(
            all_sources=all_sources,
            compilation_targets=tuple(sorted(targets)),
            stale=dict(sorted(stale.items())),
            unresolved=graph.unresolved,
            explicit=frozenset(explicit),
            fingerprints={identity: fingerprints[identity] for identity in all_sources},
            remappings={
                reference: identity
                for reference, identity in graph.remappings.items()
                if identity in all_sources
            },
        )


__all__ = ["TargetResolver", "TargetSet"]
