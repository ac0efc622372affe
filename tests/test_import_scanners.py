from __future__ import annotations

import pytest

from parse.ast_imports import PythonImportScanner, extract_imports
from parse.scanner import get_scanner
from parse.solidity_imports import SolidityImportScanner, mask_strings, strip_comments


def test_python_scanner_reports_plain_and_from_imports() -> None:
    text = "import os.path\nimport pkg.core as core\nfrom pkg import util\n"

    assert PythonImportScanner().scan(text) == {
        "os.path",
        "pkg.core",
        "pkg",
        "pkg.util",
    }


def test_python_scanner_keeps_relative_levels() -> None:
    text = "from . import sibling\nfrom ..base import Thing\nfrom .mod import *\n"

    assert PythonImportScanner().scan(text) == {
        ".sibling",
        "..base",
        "..base.Thing",
        ".mod",
    }


def test_python_scanner_tolerates_syntax_errors() -> None:
    assert PythonImportScanner().scan("import B\ndef broken(:\n") == frozenset()
    assert PythonImportScanner().scan("\x00") == frozenset()


def test_extract_imports_groups_by_kind() -> None:
    imports = extract_imports("from a import *\nfrom .b import c\nimport d\n")

    assert imports["import_star"] == [(1, "a", "*", 0)]
    assert imports["relative_import"] == [(2, "b", "c", 1)]
    assert imports["import"] == [(3, "d", "", 0)]


def test_solidity_scanner_matches_every_import_form() -> None:
    text = """
pragma solidity ^0.8.0;
import "./A.sol";
import './B.sol' as B;
import * as C from "../lib/C.sol";
import {D, E as F} from "@openzeppelin/contracts/D.sol";
import {G}
    from "./multi/G.sol";
contract X {}
"""

    assert SolidityImportScanner().scan(text) == {
        "./A.sol",
        "./B.sol",
        "../lib/C.sol",
        "@openzeppelin/contracts/D.sol",
        "./multi/G.sol",
    }


def test_solidity_scanner_ignores_commented_imports() -> None:
    text = """
// import "./Line.sol";
/* import "./Block.sol";
   import "./Block2.sol"; */
import "./Real.sol"; // trailing comment
"""

    assert SolidityImportScanner().scan(text) == {"./Real.sol"}


def test_solidity_scanner_skips_malformed_directives() -> None:
    text = 'import "./NoSemicolon.sol"\nimport ;\nimport {A from "./Bad.sol";\nimport "";\n'

    assert SolidityImportScanner().scan(text) == frozenset()


def test_solidity_scanner_ignores_imports_inside_string_literals() -> None:
    text = """
import "./Real.sol";
contract X {
    string constant A = "import 'x.sol';";
    string constant B = 'import {Y} from "y.sol";';
    string constant C = "escaped \\" import \\"z.sol\\";";
}
"""

    assert SolidityImportScanner().scan(text) == {"./Real.sol"}


def test_mask_strings_keeps_import_paths_and_layout() -> None:
    text = 'import {A} from "a.sol";\nstring s = "hidden";\n'

    masked = mask_strings(text)

    assert 'from "a.sol"' in masked
    assert "hidden" not in masked
    assert len(masked) == len(text)


def test_strip_comments_preserves_strings_and_lines() -> None:
    text = 'string s = "http://x"; /* a\nb */ x; // y\n'

    stripped = strip_comments(text)

    assert '"http://x"' in stripped
    assert "a\nb" not in stripped
    assert stripped.count("\n") == text.count("\n")
    assert "// y" not in stripped


def test_get_scanner_by_language() -> None:
    assert isinstance(get_scanner("python"), PythonImportScanner)
    assert isinstance(get_scanner("solidity"), SolidityImportScanner)

    with pytest.raises(ValueError, match="No import scanner"):
        get_scanner("cobol")
