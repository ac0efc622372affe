"""Loading, saving and updating the persisted build record."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from artifacts.models.records import BuildRecord, RecordEntry
from artifacts.utils import _load_json, _write_json
from contract.errors import RecordError

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.compilation import CompilationResult
    from targets.resolver import TargetSet

logger = logging.getLogger(__name__)


def load_build_record(path: Path) -> BuildRecord:
    """Load a build record; a missing file is an empty record (first build)."""
    if not path.is_file():
        logger.debug(f"No build record at {path}; treating every source as new")
        return BuildRecord()

    try:
        data = _load_json(path)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in build record {path}: {exc}"
        raise RecordError(msg) from exc

    try:
        record = BuildRecord.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid build record {path}: {exc}"
        raise RecordError(msg) from exc

    logger.info(f"Loaded build record with {len(record)} entries from {path}")
    return record


def write_build_record(path: Path, record: BuildRecord) -> None:
    _write_json(path, record)
    logger.debug(f"Saved build record with {len(record)} entries to {path}")


def update_build_record(
    record: BuildRecord,
    target_set: TargetSet,
    result: CompilationResult | None = None,
) -> BuildRecord:
    """Return a new record with every source of a successful pass recorded.

    Every module in the submitted closure was compiled consistently, so each
    gets its current fingerprint. ``record`` itself is left untouched.
    """
    compiler = result.compiler if result is not None else None
    entries = dict(record.entries)
    for identity, current in target_set.fingerprints.items():
        entries[identity] = RecordEntry(fingerprint=current, compiler=compiler)
    return BuildRecord(entries=dict(sorted(entries.items())))


__all__ = ["load_build_record", "update_build_record", "write_build_record"]
