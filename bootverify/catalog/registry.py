"""Artifact registry and catalog loading.

A :class:`Registry` is an ordered collection of artifacts.  The CLI loads
one from a ``"package.module:attribute"`` reference so catalogs live in
their own packages.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict

from bootverify.catalog.base import Artifact


class RegistryLoadError(ImportError):
    """Raised when a catalog reference cannot be resolved to a Registry."""


class RegistryEntry(BaseModel):
    """One registered artifact."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    artifact: Artifact
    skip_verification: bool = False

    @property
    def key(self) -> str:
        return self.artifact.metadata().describe()


class Registry:
    """Ordered, key-unique artifact catalog.

    Parameters
    ----------
    entries:
        Initial entries.  Duplicate keys are rejected.
    """

    def __init__(self, entries: Iterable[RegistryEntry] = ()) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: RegistryEntry) -> None:
        if entry.key in self._entries:
            raise ValueError(f"Artifact {entry.key!r} is already registered")
        self._entries[entry.key] = entry

    def register(self, artifact: Artifact, *, skip_verification: bool = False) -> None:
        """Add *artifact* to the registry."""
        self.add(RegistryEntry(artifact=artifact, skip_verification=skip_verification))

    def get(self, key: str) -> RegistryEntry | None:
        return self._entries.get(key)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


def load_registry(reference: str) -> Registry:
    """Import ``"module:attribute"`` and return the Registry it names.

    The attribute may be a :class:`Registry` or a zero-argument callable
    returning one.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise RegistryLoadError(
            f"Catalog reference {reference!r} must look like 'package.module:attribute'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RegistryLoadError(f"Cannot import catalog module {module_name!r}: {exc}") from exc

    try:
        target = getattr(module, attr)
    except AttributeError as exc:
        raise RegistryLoadError(f"Module {module_name!r} has no attribute {attr!r}") from exc

    if callable(target) and not isinstance(target, Registry):
        target = target()
    if not isinstance(target, Registry):
        raise RegistryLoadError(
            f"{reference!r} resolved to {type(target).__name__}, expected Registry"
        )
    return target
