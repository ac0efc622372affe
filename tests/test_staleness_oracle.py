from __future__ import annotations

from artifacts.models.compiler import CompilerInfo
from artifacts.models.records import BuildRecord, RecordEntry
from staleness.oracle import StaleReason, StalenessOracle
from utils import fingerprint

SOLC_8_20 = CompilerInfo(name="solc", version="0.8.20")
SOLC_8_24 = CompilerInfo(name="solc", version="0.8.24")


def _record(**entries: RecordEntry) -> BuildRecord:
    return BuildRecord(entries=dict(entries))


def test_never_built_module_is_stale() -> None:
    oracle = StalenessOracle()

    assert oracle.reason("A", fingerprint("a"), BuildRecord()) is StaleReason.NEVER_BUILT
    assert oracle.is_stale("A", fingerprint("a"), BuildRecord())


def test_fingerprint_comparison() -> None:
    oracle = StalenessOracle()
    record = _record(A=RecordEntry(fingerprint=fingerprint("a")))

    assert not oracle.is_stale("A", fingerprint("a"), record)
    assert oracle.reason("A", fingerprint("a2"), record) is StaleReason.CONTENT_CHANGED


def test_compiler_change_only_counts_when_enabled() -> None:
    record = _record(A=RecordEntry(fingerprint=fingerprint("a"), compiler=SOLC_8_20))

    relaxed = StalenessOracle(compiler=SOLC_8_24)
    strict = StalenessOracle(compiler=SOLC_8_24, compare_compiler=True)
    same = StalenessOracle(compiler=SOLC_8_20, compare_compiler=True)

    assert not relaxed.is_stale("A", fingerprint("a"), record)
    assert strict.reason("A", fingerprint("a"), record) is StaleReason.COMPILER_CHANGED
    assert not same.is_stale("A", fingerprint("a"), record)


def test_unknown_compiler_on_either_side_is_not_a_change() -> None:
    oracle = StalenessOracle(compiler=SOLC_8_24, compare_compiler=True)
    record = _record(A=RecordEntry(fingerprint=fingerprint("a")))

    assert not oracle.is_stale("A", fingerprint("a"), record)
    assert not StalenessOracle(compare_compiler=True).is_stale(
        "A",
        fingerprint("a"),
        _record(A=RecordEntry(fingerprint=fingerprint("a"), compiler=SOLC_8_20)),
    )
