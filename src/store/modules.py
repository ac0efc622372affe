"""In-memory store of module text and fingerprints for one build pass."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from contract.errors import MissingSourceError, StoreFrozenError
from utils import fingerprint, normalize_identity

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Module:
    """A loaded source unit. Identity is the normalized path, not the content."""

    identity: str
    text: str
    fingerprint: str


class SourceReader(Protocol):
    def read(self, identity: str) -> str:
        """Return the text for ``identity`` or raise ``FileNotFoundError``."""
        ...


class FileSystemReader:
    """Read UTF-8 sources from disk, resolving relative identities under a base."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path

    def read(self, identity: str) -> str:
        path = Path(identity)
        if not path.is_absolute():
            path = self.base_path / path
        if not path.is_file():
            msg = f"Source file not found: {path}"
            raise FileNotFoundError(msg)
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Source file is not valid UTF-8: {path}"
            raise FileNotFoundError(msg) from exc


class MappingReader:
    """Serve sources from an in-memory mapping."""

    def __init__(self, sources: Mapping[str, str]) -> None:
        self._sources = {normalize_identity(k): v for k, v in sources.items()}

    def read(self, identity: str) -> str:
        try:
            return self._sources[identity]
        except KeyError:
            msg = f"Source not found: {identity}"
            raise FileNotFoundError(msg) from None


class ModuleStore:
    """Holds the raw text of every known module, keyed by normalized identity.

    Modules are loaded lazily through the reader. Once ``freeze()`` is called
    the loaded text is read-only for the rest of the pass; new identities may
    still be loaded, but existing ones can no longer be replaced.
    """

    def __init__(self, reader: SourceReader | None = None) -> None:
        self._reader = reader
        self._modules: dict[str, Module] = {}
        self._lock = threading.Lock()
        self._frozen = False

    @classmethod
    def from_sources(cls, sources: Mapping[str, str]) -> ModuleStore:
        return cls(MappingReader(sources))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def add(self, identity: str, text: str) -> Module:
        key = normalize_identity(identity)
        module = Module(identity=key, text=text, fingerprint=fingerprint(text))
        with self._lock:
            existing = self._modules.get(key)
            if existing is not None and existing.text != text and self._frozen:
                msg = f"Module {key} cannot change after the store was frozen"
                raise StoreFrozenError(msg)
            self._modules[key] = module
        return module

    def get(self, identity: str) -> Module | None:
        return self._modules.get(normalize_identity(identity))

    def load(self, identity: str) -> Module:
        module = self.try_load(identity)
        if module is None:
            raise MissingSourceError([normalize_identity(identity)])
        return module

    def try_load(self, identity: str) -> Module | None:
        key = normalize_identity(identity)
        cached = self._modules.get(key)
        if cached is not None:
            return cached
        if self._reader is None:
            return None
        try:
            text = self._reader.read(key)
        except FileNotFoundError as exc:
            logger.debug(f"Cannot load {key}: {exc}")
            return None

        module = Module(identity=key, text=text, fingerprint=fingerprint(text))
        with self._lock:
            # Another worker may have loaded it first; keep the first copy.
            return self._modules.setdefault(key, module)

    def load_many(
        self,
        identities: Iterable[str],
        *,
        max_workers: int | None = None,
    ) -> dict[str, Module]:
        """Load and fingerprint several modules concurrently.

        The returned mapping is ordered by identity regardless of completion
        order. Raises ``MissingSourceError`` naming every identity that could
        not be loaded.
        """
        loaded = self.try_load_many(identities, max_workers=max_workers)
        missing = [key for key, module in loaded.items() if module is None]
        if missing:
            raise MissingSourceError(missing)
        return {key: module for key, module in loaded.items() if module is not None}

    def try_load_many(
        self,
        identities: Iterable[str],
        *,
        max_workers: int | None = None,
    ) -> dict[str, Module | None]:
        """Like ``load_many`` but maps unreadable identities to ``None``."""
        keys = sorted({normalize_identity(identity) for identity in identities})
        if max_workers == 1 or len(keys) <= 1:
            loaded = [self.try_load(key) for key in keys]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                loaded = list(executor.map(self.try_load, keys))
        return dict(zip(keys, loaded))

    def identities(self) -> list[str]:
        return sorted(self._modules)

    def texts(self) -> dict[str, str]:
        return {key: self._modules[key].text for key in sorted(self._modules)}

    def fingerprints(self) -> dict[str, str]:
        return {key: self._modules[key].fingerprint for key in sorted(self._modules)}

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, str) or not identity.strip():
            return False
        return normalize_identity(identity) in self._modules

    def __len__(self) -> int:
        return len(self._modules)


__all__ = [
    "FileSystemReader",
    "MappingReader",
    "Module",
    "ModuleStore",
    "SourceReader",
]
