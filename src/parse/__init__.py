"""Import scanning and reference resolution."""

from parse.ast_imports import (
    PythonImportScanner,
    extract_imports,
    resolve_relative_import,
)
from parse.references import (
    PathResolver,
    PythonModuleResolver,
    Resolver,
    get_resolver,
)
from parse.scanner import SCANNERS, SOURCE_SUFFIXES, ImportScanner, get_scanner
from parse.solidity_imports import SolidityImportScanner, mask_strings, strip_comments

__all__ = [
    "SCANNERS",
    "SOURCE_SUFFIXES",
    "ImportScanner",
    "PathResolver",
    "PythonImportScanner",
    "PythonModuleResolver",
    "Resolver",
    "SolidityImportScanner",
    "extract_imports",
    "get_resolver",
    "get_scanner",
    "mask_strings",
    "resolve_relative_import",
    "strip_comments",
]
