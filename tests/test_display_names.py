from __future__ import annotations

from pathlib import Path

from targets.display import display_names


def test_names_are_sorted_and_hidden_prefixes_dropped() -> None:
    names = display_names(
        ["contracts/b.sol", "lib/forge-std/Test.sol", "contracts/a.sol"],
        Path("/work"),
        hidden_prefixes=["lib/"],
    )

    assert names == ["contracts/a.sol", "contracts/b.sol"]


def test_absolute_identities_are_shown_relative(tmp_path: Path) -> None:
    identity = (tmp_path / "contracts" / "A.sol").as_posix()

    assert display_names([identity], tmp_path) == ["./contracts/A.sol"]
