"""Catalog reconciliation: load-or-create, upsert one version, persist.

A reconciliation moves through these states:

    ABSENT ──────────────┐
                         ├─> MERGED ─> PERSISTED
    LOADED ──────────────┘
       any step ─> FAILED

Upserting is keyed by exact version string. An existing version is replaced
wholesale at its original position (its previous providers are discarded);
a new version is appended. Versions with other strings are never touched.
"""

from __future__ import annotations

import logging
from enum import Enum

from .json_store import JsonCatalogStore
from .models import CatalogDocument, ProviderEntry, VersionEntry

logger = logging.getLogger(__name__)


class CatalogState(str, Enum):
    ABSENT = "absent"
    LOADED = "loaded"
    MERGED = "merged"
    PERSISTED = "persisted"
    FAILED = "failed"


def build_version_entry(
    version: str, provider: str, url: str, checksum: str
) -> VersionEntry:
    """Return a version entry holding exactly one provider."""
    return VersionEntry(
        version=version,
        providers=(ProviderEntry(name=provider, url=url, checksum=checksum),),
    )


def new_catalog(
    name: str, description: str | None, entry: VersionEntry
) -> CatalogDocument:
    return CatalogDocument(name=name, description=description, versions=(entry,))


def upsert_version(document: CatalogDocument, entry: VersionEntry) -> CatalogDocument:
    """Return a copy of ``document`` with ``entry`` replacing or appending."""
    versions = list(document.versions)
    index = document.version_index(entry.version)
    if index < 0:
        logger.debug("Appending version %s to %s", entry.version, document.name)
        versions.append(entry)
    else:
        logger.debug(
            "Replacing version %s of %s at position %d",
            entry.version,
            document.name,
            index,
        )
        versions[index] = entry
    return document.model_copy(update={"versions": tuple(versions)})


class CatalogReconciler:
    """Drive one load → merge → persist cycle against a catalog store.

    Each reconciler owns its document for the duration of one cycle; the
    file on disk is the source of truth and is re-read on every
    :meth:`reconcile` call.
    """

    def __init__(self, store: JsonCatalogStore):
        self.store = store
        self.state: CatalogState | None = None
        self.document: CatalogDocument | None = None

    def load(self) -> CatalogDocument | None:
        if not self.store.exists():
            self.state = CatalogState.ABSENT
            self.document = None
            return None
        self.document = self.store.load()
        self.state = CatalogState.LOADED
        return self.document

    def merge(
        self, name: str, description: str | None, entry: VersionEntry
    ) -> CatalogDocument:
        if self.state is CatalogState.ABSENT:
            self.document = new_catalog(name, description, entry)
        elif self.state is CatalogState.LOADED and self.document is not None:
            document = upsert_version(self.document, entry)
            if document.description is None and description is not None:
                document = document.model_copy(update={"description": description})
            self.document = document
        else:
            raise RuntimeError(f"Cannot merge from state {self.state}")
        self.state = CatalogState.MERGED
        return self.document

    def persist(self) -> CatalogDocument:
        if self.state is not CatalogState.MERGED or self.document is None:
            raise RuntimeError(f"Cannot persist from state {self.state}")
        self.store.write(self.document)
        self.state = CatalogState.PERSISTED
        logger.info(
            "Persisted catalog %s (%d versions)",
            self.store.path,
            len(self.document.versions),
        )
        return self.document

    def reconcile(
        self, name: str, description: str | None, entry: VersionEntry
    ) -> CatalogDocument:
        """Upsert ``entry`` into the catalog and write it back."""
        try:
            self.load()
            self.merge(name, description, entry)
            return self.persist()
        except Exception:
            self.state = CatalogState.FAILED
            raise


__all__ = [
    "CatalogReconciler",
    "CatalogState",
    "build_version_entry",
    "new_catalog",
    "upsert_version",
]
