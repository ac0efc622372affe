"""Pluggable import scanner registry."""

from __future__ import annotations

from typing import Protocol

from parse.ast_imports import PythonImportScanner
from parse.solidity_imports import SolidityImportScanner


class ImportScanner(Protocol):
    """Pure, best-effort static reference discovery for one language."""

    def scan(self, text: str) -> frozenset[str]: ...


SCANNERS: dict[str, type[ImportScanner]] = {
    "python": PythonImportScanner,
    "solidity": SolidityImportScanner,
}

SOURCE_SUFFIXES: dict[str, tuple[str, ...]] = {
    "python": (".py",),
    "solidity": (".sol",),
}


def get_scanner(language: str) -> ImportScanner:
    try:
        scanner_cls = SCANNERS[language]
    except KeyError:
        msg = (
            f"No import scanner for language {language!r}. "
            f"Known languages: {', '.join(sorted(SCANNERS))}"
        )
        raise ValueError(msg) from None
    return scanner_cls()


__all__ = ["SCANNERS", "SOURCE_SUFFIXES", "ImportScanner", "get_scanner"]
