"""Staleness checks against the prior build record."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artifacts.models.compiler import CompilerInfo
    from artifacts.models.records import BuildRecord


class StaleReason(str, Enum):
    """Why a module has to be recompiled."""

    NEVER_BUILT = "never_built"
    CONTENT_CHANGED = "content_changed"
    COMPILER_CHANGED = "compiler_changed"
    UNRESOLVED_IMPORT = "unresolved_import"
    DEPENDENCY_CHANGED = "dependency_changed"


class StalenessOracle:
    """Pure comparison of a module's current state with its recorded state.

    A module is stale when the record has no entry for it, when its
    fingerprint differs from the recorded one, or, with ``compare_compiler``
    enabled, when the recorded compiler differs from ``compiler``. The
    compiler check is skipped when either side does not know its compiler.
    """

    def __init__(
        self,
        *,
        compiler: CompilerInfo | None = None,
        compare_compiler: bool = False,
    ) -> None:
        self.compiler = compiler
        self.compare_compiler = compare_compiler

    def reason(
        self,
        identity: str,
        current_fingerprint: str,
        prior_record: BuildRecord,
    ) -> StaleReason | None:
        entry = prior_record.get(identity)
        if entry is None:
            return StaleReason.NEVER_BUILT
        if entry.fingerprint != current_fingerprint:
            return StaleReason.CONTENT_CHANGED
        if (
            self.compare_compiler
            and self.compiler is not None
            and entry.compiler is not None
            and entry.compiler != self.compiler
        ):
            return StaleReason.COMPILER_CHANGED
        return None

    def is_stale(
        self,
        identity: str,
        current_fingerprint: str,
        prior_record: BuildRecord,
    ) -> bool:
        return self.reason(identity, current_fingerprint, prior_record) is not None


__all__ = ["StaleReason", "StalenessOracle"]
