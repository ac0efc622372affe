"""Reference resolvers mapping raw import references to source identities.

A resolver is any callable ``(from_identity, reference) -> identity | None``;
``None`` means the reference could not be resolved. Resolution policy belongs
to the caller, these are the two policies rebuildmap ships with.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Iterable, Sequence

from parse.ast_imports import resolve_relative_import
from utils import normalize_identity, path_to_module

Resolver = Callable[[str, str], "str | None"]


class PathResolver:
    """Resolve path-style references such as Solidity import paths.

    ``./`` and ``../`` references are anchored on the importing module's
    directory. Absolute references are taken as-is. Anything else is tried
    under each root in order, so ``roots=("", "node_modules")`` prefers a
    project-relative file over an installed package of the same name.
    """

    def __init__(
        self,
        roots: Sequence[str] = ("",),
        exists: Callable[[str], bool] | None = None,
    ) -> None:
        self.roots = tuple(roots) or ("",)
        self.exists = exists

    def _candidates(self, from_identity: str, reference: str) -> list[str]:
        if reference.startswith(("./", "../")):
            return [posixpath.join(posixpath.dirname(from_identity), reference)]
        if reference.startswith("/"):
            return [reference]
        return [posixpath.join(root, reference) if root else reference for root in self.roots]

    def __call__(self, from_identity: str, reference: str) -> str | None:
        reference = reference.replace("\\", "/")
        for candidate in self._candidates(from_identity, reference):
            try:
                identity = normalize_identity(candidate)
            except ValueError:
                continue
            if self.exists is None or self.exists(identity):
                return identity
        return None


class PythonModuleResolver:
    """Resolve dotted module references against a set of known ``.py`` paths.

    Relative references (leading dots) are anchored on the importing module;
    a package's ``__init__.py`` anchors on the package itself. When a dotted
    name is not a known module the nearest known parent package is used,
    which covers ``from pkg import attribute``.
    """

    def __init__(self, identities: Iterable[str]) -> None:
        self._index: dict[str, str] = {}
        for identity in sorted(identities):
            if not identity.endswith(".py"):
                continue
            try:
                module = path_to_module(identity)
            except ValueError:
                continue
            self._index.setdefault(module, identity)

    def _absolute_name(self, from_identity: str, reference: str) -> str | None:
        if not reference.startswith("."):
            return reference
        level = len(reference) - len(reference.lstrip("."))
        try:
            importing_module = path_to_module(from_identity)
        except ValueError:
            return None
        if posixpath.basename(from_identity) == "__init__.py":
            importing_module = f"{importing_module}.__init__"
        return resolve_relative_import(importing_module, reference[level:], level)

    def __call__(self, from_identity: str, reference: str) -> str | None:
        name = self._absolute_name(from_identity, reference)
        while name:
            identity = self._index.get(name)
            if identity is not None:
                return identity
            if "." not in name:
                return None
            name = name.rsplit(".", 1)[0]
        return None


def get_resolver(
    language: str,
    identities: Iterable[str],
    *,
    roots: Sequence[str] = ("",),
    exists: Callable[[str], bool] | None = None,
) -> Resolver:
    """Return the default resolver for ``language``."""
    if language == "python":
        return PythonModuleResolver(identities)
    if language == "solidity":
        return PathResolver(roots=roots, exists=exists)
    msg = f"No reference resolver for language {language!r}"
    raise ValueError(msg)


__all__ = ["PathResolver", "PythonModuleResolver", "Resolver", "get_resolver"]
