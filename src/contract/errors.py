"""Error kinds raised across the resolution and compilation boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from contract.models import Diagnostic
    from graph.dependency import UnresolvedImport


class RebuildError(Exception):
    """Base class for rebuildmap errors."""


class MissingSourceError(RebuildError, LookupError):
    """Raised when a source identity has no readable content."""

    def __init__(self, identities: Iterable[str]) -> None:
        self.identities = tuple(sorted(set(identities)))
        super().__init__(self._format())

    def _format(self) -> str:
        return f"No source content for: {', '.join(self.identities)}"


class MissingExplicitSourceError(MissingSourceError):
    """Raised when an explicitly requested path is absent; aborts the pass."""

    def _format(self) -> str:
        return f"Explicitly requested sources not found: {', '.join(self.identities)}"


class StoreFrozenError(RebuildError):
    """Raised on an attempt to change module text after the store was frozen."""


class UnresolvedImportError(RebuildError):
    """Raised when unresolved imports are configured to be fatal."""

    def __init__(self, unresolved: Sequence[UnresolvedImport]) -> None:
        self.unresolved = tuple(unresolved)
        lines = [f"{item.source}: {item.reference!r}" for item in self.unresolved]
        super().__init__("Unresolved imports:\n  " + "\n  ".join(lines))


class DispatchFailure(RebuildError):
    """The compiler backend reported a failure; propagated unchanged."""

    def __init__(
        self,
        message: str,
        diagnostics: Sequence[Diagnostic] = (),
    ) -> None:
        self.diagnostics = tuple(diagnostics)
        super().__init__(message)


class ResultAssemblyError(RebuildError):
    """Raised when backend output cannot be mapped back onto a source."""


class RecordError(RebuildError):
    """Raised when a persisted build record exists but cannot be read."""


__all__ = [
    "DispatchFailure",
    "MissingExplicitSourceError",
    "MissingSourceError",
    "RebuildError",
    "RecordError",
    "ResultAssemblyError",
    "StoreFrozenError",
    "UnresolvedImportError",
]
