"""Compile entry points: resolve targets, dispatch once, assemble results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.models.compiler import CompilerSettings
from artifacts.models.records import BuildRecord
from assemble.assembler import ResultAssembler
from contract.errors import DispatchFailure
from dispatch.base import DispatchRequest
from targets.display import display_names
from targets.resolver import TargetSet
from utils import fingerprint, normalize_identity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from artifacts.models.compilation import CompilationResult
    from dispatch.base import CompilationDispatcher
    from parse.references import Resolver
    from targets.resolver import TargetResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompilationOutcome:
    """Result of a compile call.

    ``compilations`` is empty both when nothing needed compiling and when the
    backend produced no compiled modules; ``target_set`` tells them apart.
    """

    compilations: list[CompilationResult] = field(default_factory=list)
    target_set: TargetSet = field(default_factory=TargetSet.empty)

    @property
    def compiled(self) -> bool:
        return bool(self.compilations)


def _dispatch(
    target_set: TargetSet,
    dispatcher: CompilationDispatcher,
    settings: CompilerSettings,
) -> list[CompilationResult]:
    request = DispatchRequest(
        sources=target_set.all_sources,
        targets=list(target_set.compilation_targets),
        remappings=target_set.remappings,
        settings=settings,
    )
    response = dispatcher.dispatch(request)

    if response.errors:
        msg = f"Compiler reported {len(response.errors)} error(s)"
        raise DispatchFailure(msg, response.diagnostics)

    if settings.strict and response.warnings:
        msg = f"Compiler reported {len(response.warnings)} warning(s) in strict mode"
        raise DispatchFailure(msg, response.warnings)

    result = ResultAssembler().assemble(response, target_set)
    return [] if result.is_empty else [result]


def compile_sources(
    sources: Mapping[str, str],
    dispatcher: CompilationDispatcher,
    settings: CompilerSettings | None = None,
) -> CompilationOutcome:
    """Compile exactly ``sources`` without evaluating their dependencies."""
    normalized = {normalize_identity(key): text for key, text in sources.items()}
    all_sources = dict(sorted(normalized.items()))
    target_set = TargetSet(
        all_sources=all_sources,
        compilation_targets=tuple(all_sources),
        explicit=frozenset(all_sources),
        fingerprints={identity: fingerprint(text) for identity, text in all_sources.items()},
    )
    if not all_sources:
        return CompilationOutcome([], target_set)
    return CompilationOutcome(
        _dispatch(target_set, dispatcher, settings or CompilerSettings()),
        target_set,
    )


def compile_with_dependencies(
    explicit_paths: Iterable[str],
    discovered_paths: Iterable[str],
    prior_record: BuildRecord,
    resolver: Resolver | None,
    *,
    target_resolver: TargetResolver,
    dispatcher: CompilationDispatcher,
    settings: CompilerSettings | None = None,
    compile_all: bool = False,
    reporter: Callable[[list[str]], None] | None = None,
    working_directory: Path | None = None,
    hidden_prefixes: Iterable[str] = (),
) -> CompilationOutcome:
    """Resolve targets and submit their whole closure in a single dispatch.

    When no target needs compiling the dispatcher is not called. Backend
    failures propagate as ``DispatchFailure``.
    """
    if resolver is None:
        msg = "a reference resolver is required to compile with dependencies"
        raise ValueError(msg)

    target_set = target_resolver.resolve(
        explicit_paths,
        discovered_paths,
        prior_record,
        resolver,
        compile_all=compile_all,
    )

    if reporter is not None:
        shown = (
            target_set.compilation_targets
            if target_set.needs_compilation
            else target_set.all_sources
        )
        reporter(display_names(shown, working_directory or Path.cwd(), hidden_prefixes))

    if not target_set.needs_compilation:
        logger.info("No compilation targets; nothing to compile")
        return CompilationOutcome([], target_set)

    return CompilationOutcome(
        _dispatch(target_set, dispatcher, settings or CompilerSettings()),
        target_set,
    )


def compile_all(
    discovered_paths: Iterable[str],
    resolver: Resolver,
    *,
    files: Iterable[str] = (),
    target_resolver: TargetResolver,
    dispatcher: CompilationDispatcher,
    settings: CompilerSettings | None = None,
    reporter: Callable[[list[str]], None] | None = None,
    working_directory: Path | None = None,
    hidden_prefixes: Iterable[str] = (),
) -> CompilationOutcome:
    """Compile every discovered source plus the explicit ``files``."""
    return compile_with_dependencies(
        files,
        discovered_paths,
        BuildRecord(),
        resolver,
        target_resolver=target_resolver,
        dispatcher=dispatcher,
        settings=settings,
        compile_all=True,
        reporter=reporter,
        working_directory=working_directory,
        hidden_prefixes=hidden_prefixes,
    )


def compile_necessary(
    discovered_paths: Iterable[str],
    prior_record: BuildRecord,
    resolver: Resolver,
    *,
    files: Iterable[str] = (),
    target_resolver: TargetResolver,
    dispatcher: CompilationDispatcher,
    settings: CompilerSettings | None = None,
    reporter: Callable[[list[str]], None] | None = None,
    working_directory: Path | None = None,
    hidden_prefixes: Iterable[str] = (),
) -> CompilationOutcome:
    """Compile only what changed since ``prior_record``, plus its importers."""
    return compile_with_dependencies(
        files,
        discovered_paths,
        prior_record,
        resolver,
        target_resolver=target_resolver,
        dispatcher=dispatcher,
        settings=settings,
        compile_all=False,
        reporter=reporter,
        working_directory=working_directory,
        hidden_prefixes=hidden_prefixes,
    )


__all__ = [
    "CompilationOutcome",
    "compile_all",
    "compile_necessary",
    "compile_sources",
    "compile_with_dependencies",
]
