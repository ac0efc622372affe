"""Map raw backend output back onto source identities."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.models.compilation import CompilationResult, CompiledModule
from contract.errors import ResultAssemblyError
from utils import normalize_identity

if TYPE_CHECKING:
    from dispatch.base import DispatchResponse
    from targets.resolver import TargetSet

logger = logging.getLogger(__name__)


class ResultAssembler:
    """Turn a ``DispatchResponse`` into a ``CompilationResult``.

    Backend keys are normalized the same way source identities are, so
    ``./contracts/A.sol`` and ``contracts\\A.sol`` both map onto
    ``contracts/A.sol``. Source indexes come from the backend where it reports
    them; other sources are numbered by their position in the sorted closure,
    skipping any index the backend already used.
    """

    def _identity_for(self, key: str, target_set: TargetSet) -> str:
        try:
            identity = normalize_identity(key)
        except ValueError:
            identity = key
        if identity not in target_set.all_sources:
            msg = f"Backend reported output for unknown source {key!r}"
            raise ResultAssemblyError(msg)
        return identity

    def _source_indexes(
        self,
        response: DispatchResponse,
        target_set: TargetSet,
    ) -> dict[str, int]:
        indexes: dict[str, int] = {}
        for key, source_id in sorted(response.source_ids.items(), key=lambda kv: (kv[1], kv[0])):
            identity = self._identity_for(key, target_set)
            indexes.setdefault(identity, source_id)

        used = set(indexes.values())
        next_index = 0
        for identity in sorted(target_set.all_sources):
            if identity in indexes:
                continue
            while next_index in used:
                next_index += 1
            indexes[identity] = next_index
            used.add(next_index)

        return dict(sorted(indexes.items()))

    def assemble(
        self,
        response: DispatchResponse,
        target_set: TargetSet,
    ) -> CompilationResult:
        source_indexes = self._source_indexes(response, target_set)
        targets = set(target_set.compilation_targets)

        contracts: list[CompiledModule] = []
        for raw in response.artifacts:
            identity = self._identity_for(raw.source_key, target_set)
            contracts.append(
                CompiledModule(
                    source=identity,
                    name=raw.name,
                    source_index=source_indexes[identity],
                    is_target=identity in targets,
                    artifact=raw.payload,
                )
            )
        contracts.sort(key=lambda compiled: (compiled.source, compiled.name))

        if not contracts:
            logger.info("Backend reported no compiled modules")

        return CompilationResult(
            source_indexes=source_indexes,
            contracts=contracts,
            compiler=response.compiler,
            warnings=response.warnings,
        )


__all__ = ["ResultAssembler"]
