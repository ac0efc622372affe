"""Human-facing listing of the sources a build is about to compile."""

from __future__ import annotations

import os
import posixpath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def display_names(
    identities: Iterable[str],
    working_directory: Path | str,
    hidden_prefixes: Iterable[str] = (),
) -> list[str]:
    """Return sorted display names for ``identities``.

    Absolute identities are shown as ``./<path relative to the working
    directory>``. Identities starting with a hidden prefix are dropped.
    """
    hidden = tuple(hidden_prefixes)
    names: list[str] = []
    for identity in sorted(identities):
        if hidden and identity.startswith(hidden):
            continue
        if posixpath.isabs(identity):
            relative = os.path.relpath(identity, working_directory).replace(os.sep, "/")
            identity = f"./{relative}"
        names.append(identity)
    return names


__all__ = ["display_names"]
