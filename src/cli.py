"""Command-line interface for rebuildmap."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from artifacts.build_record import (
    load_build_record,
    update_build_record,
    write_build_record,
)
from artifacts.models.compiler import CompilerInfo
from artifacts.models.records import BuildRecord
from artifacts.utils import _get_output_dir_name
from artifacts.write import write_compilation, write_graph
from contract.errors import (
    DispatchFailure,
    MissingSourceError,
    RecordError,
    ResultAssemblyError,
    UnresolvedImportError,
)
from dispatch.standard_json import StandardJsonDispatcher
from parse.references import Resolver, get_resolver
from parse.scanner import SOURCE_SUFFIXES, get_scanner
from pipeline.compile import compile_with_dependencies
from scan.files import find_source_files
from settings.config import (
    ConfigError,
    RebuildConfig,
    load_config,
    resolve_output_dir,
    resolve_record_path,
    resolve_sources_dir,
)
from staleness.oracle import StalenessOracle
from store.modules import FileSystemReader, ModuleStore
from targets.display import display_names
from targets.resolver import TargetResolver
from utils import normalize_identity


@dataclass
class _Context:
    root: Path
    config: RebuildConfig
    store: ModuleStore
    resolver: Resolver
    target_resolver: TargetResolver
    discovered: list[str]
    explicit: list[str]
    record_path: Path
    output_dir: Path


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )


def _add_selection_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--all",
        action="store_true",
        help="Target every discovered source instead of only stale ones",
    )
    parser.add_argument(
        "--files",
        nargs="+",
        default=[],
        help=(
            "Explicit files to consider besides discovered sources "
            "(relative paths are relative to the project root)"
        ),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rebuildmap")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    targets_parser = subparsers.add_parser(
        "targets", help="List the sources the next build would compile"
    )
    _add_common_paths(targets_parser)
    _add_selection_flags(targets_parser)

    graph_parser = subparsers.add_parser("graph", help="Write dependency graph artifacts")
    _add_common_paths(graph_parser)
    graph_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for graph artifacts (default: config output dir)",
    )

    compile_parser = subparsers.add_parser(
        "compile", help="Compile stale sources and update the build record"
    )
    _add_common_paths(compile_parser)
    _add_selection_flags(compile_parser)
    compile_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not list the sources being compiled",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _to_identity(root: Path, path: str) -> str:
    """Identities are root-relative POSIX paths; paths outside root stay absolute.

    Relative paths are taken relative to ``root``, not the working directory.
    """
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    candidate = candidate.resolve()
    try:
        return normalize_identity(candidate.relative_to(root))
    except ValueError:
        return normalize_identity(candidate)


def _prepare(root: Path, files: list[str]) -> _Context:
    config = load_config(root)
    sources_dir = resolve_sources_dir(root, config.sources_dir)
    output_dir = resolve_output_dir(root, config.output_dir)

    discovered = [
        normalize_identity(path.relative_to(root))
        for path in find_source_files(
            sources_dir,
            suffixes=SOURCE_SUFFIXES[config.language],
            root=root,
            output_dir=_get_output_dir_name(output_dir, root),
            include_patterns=config.include,
            exclude_patterns=config.exclude,
            nested_gitignore=config.nested_gitignore,
        )
    ]
    explicit = [_to_identity(root, path) for path in files]

    store = ModuleStore(FileSystemReader(root))

    def exists(identity: str) -> bool:
        return identity in store or (root / identity).is_file()

    resolver = get_resolver(
        config.language,
        [*discovered, *explicit],
        roots=config.search_paths,
        exists=exists,
    )

    compiler = None
    if config.compiler.version is not None:
        compiler = CompilerInfo(
            name=Path(config.compiler.command[0]).name,
            version=config.compiler.version,
        )
    target_resolver = TargetResolver(
        store,
        scanner=get_scanner(config.language),
        oracle=StalenessOracle(
            compiler=compiler,
            compare_compiler=config.compare_compiler_version,
        ),
        unresolved=config.unresolved,
        unresolved_is_stale=config.unresolved_is_stale,
    )

    return _Context(
        root=root,
        config=config,
        store=store,
        resolver=resolver,
        target_resolver=target_resolver,
        discovered=discovered,
        explicit=explicit,
        record_path=resolve_record_path(root, config),
        output_dir=output_dir,
    )


def _print_names(names: list[str]) -> None:
    for name in names:
        sys.stdout.write(f"{name}\n")


def _handle_targets(root: Path, files: list[str], compile_all: bool) -> int:
    context = _prepare(root, files)
    prior_record = BuildRecord() if compile_all else load_build_record(context.record_path)
    target_set = context.target_resolver.resolve(
        context.explicit,
        context.discovered,
        prior_record,
        context.resolver,
        compile_all=compile_all,
    )
    _print_names(
        display_names(
            target_set.compilation_targets,
            root,
            context.config.hidden_prefixes,
        )
    )
    return 0


def _handle_graph(root: Path, out_dir: str | None) -> int:
    context = _prepare(root, [])
    graph = context.target_resolver.build_graph(context.discovered, context.resolver)

    resolved_out_dir = (
        Path(out_dir).expanduser().resolve() if out_dir is not None else context.output_dir
    )
    summary = write_graph(resolved_out_dir, graph)
    sys.stdout.write(
        f"{summary.node_count} modules, {summary.edge_count} imports, "
        f"{len(summary.cycles)} cycles, {len(summary.unresolved)} unresolved\n"
    )
    return 0


def _handle_compile(root: Path, files: list[str], compile_all: bool, quiet: bool) -> int:
    context = _prepare(root, files)
    config = context.config
    prior_record = load_build_record(context.record_path)

    outcome = compile_with_dependencies(
        context.explicit,
        context.discovered,
        BuildRecord() if compile_all else prior_record,
        context.resolver,
        target_resolver=context.target_resolver,
        dispatcher=StandardJsonDispatcher(config.compiler.command),
        settings=config.compiler,
        compile_all=compile_all,
        reporter=None if quiet or config.quiet else _print_names,
        working_directory=root,
        hidden_prefixes=config.hidden_prefixes,
    )

    if not outcome.target_set.needs_compilation:
        return 0

    result = outcome.compilations[0] if outcome.compilations else None
    if result is not None:
        write_compilation(context.output_dir, result)
    write_build_record(
        context.record_path,
        update_build_record(prior_record, outcome.target_set, result),
    )
    return 0


def _report_dispatch_failure(exc: DispatchFailure) -> None:
    sys.stderr.write(f"error: {exc}\n")
    for diagnostic in exc.diagnostics:
        sys.stderr.write(
            f"{diagnostic.location()}: {diagnostic.severity}: {diagnostic.message}\n"
        )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "targets":
            return _handle_targets(root, args.files, args.all)

        if args.command == "graph":
            return _handle_graph(root, args.out_dir)

        if args.command == "compile":
            return _handle_compile(root, args.files, args.all, args.quiet)
    except (ConfigError, RecordError, MissingSourceError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except DispatchFailure as exc:
        _report_dispatch_failure(exc)
        return 1
    except (UnresolvedImportError, ResultAssemblyError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
