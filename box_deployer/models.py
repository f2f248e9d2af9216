"""Pydantic models for box catalog documents.

A catalog document describes every published version of one artifact and,
for each version, the providers that can deploy it:

  name: myapp
  description: Base image for myapp.
  versions:
    - version: "1.2"
      providers:
        - name: virtualbox
          url: http://boxes.example.com/myapp/boxes/myapp-1.2.img
          checksum_type: sha256
          checksum: 3a7bd3e2360a3d29eea436fcfb7e44c735d117c42d1c1835420b6b9942dd4f1b

Models are frozen. Changing a catalog means building new entries and a new
document (see :mod:`box_deployer.reconcile`), never mutating fields in place.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from box_deployer.field_types import (
    LEGACY_SHA256_PATTERN,
    SHA256_PATTERN,
    Checksum,
    DownloadUrl,
    ProviderName,
    Version,
)

CHECKSUM_TYPE = "sha256"
DEFAULT_PROVIDER = "virtualbox"
# Validation context key set when reading catalogs from disk.
LEGACY_CHECKSUMS = "legacy_checksums"


class ProviderEntry(BaseModel):
    """Download location and integrity checksum for one deployment backend."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: ProviderName = DEFAULT_PROVIDER
    url: DownloadUrl
    checksum_type: Literal["sha256"] = CHECKSUM_TYPE
    checksum: Checksum

    @field_validator("checksum")
    @classmethod
    def validate_checksum(cls, v: str, info: ValidationInfo) -> str:
        """Require 64 hex digits; stored catalogs may carry unpadded legacy digests."""
        if re.fullmatch(SHA256_PATTERN, v):
            return v
        if (info.context or {}).get(LEGACY_CHECKSUMS) and re.fullmatch(
            LEGACY_SHA256_PATTERN, v
        ):
            return v
        raise ValueError(f"Invalid sha256 checksum: {v!r}")


class VersionEntry(BaseModel):
    """One published version and the providers able to deploy it."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: Version
    providers: tuple[ProviderEntry, ...] = ()


class CatalogDocument(BaseModel):
    """Catalog of all published versions for a named artifact.

    ``versions`` keeps insertion order; it is never sorted. Each version
    string appears at most once.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    description: str | None = None
    versions: tuple[VersionEntry, ...] = ()

    @field_validator("versions")
    @classmethod
    def validate_unique_versions(
        cls, versions: tuple[VersionEntry, ...]
    ) -> tuple[VersionEntry, ...]:
        seen: set[str] = set()
        for entry in versions:
            if entry.version in seen:
                raise ValueError(f"Duplicate version entry: {entry.version}")
            seen.add(entry.version)
        return versions

    def get_version(self, version: str) -> VersionEntry | None:
        for entry in self.versions:
            if entry.version == version:
                return entry
        return None

    def version_index(self, version: str) -> int:
        """Return the position of ``version`` in ``versions`` or -1."""
        for index, entry in enumerate(self.versions):
            if entry.version == version:
                return index
        return -1

    # Serialization ---------------------------------------------------------
    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_json_dict(cls, data: Any) -> CatalogDocument:
        """Parse a stored catalog; unpadded legacy checksums are accepted."""
        return cls.model_validate(data, context={LEGACY_CHECKSUMS: True})


__all__ = [
    "CHECKSUM_TYPE",
    "DEFAULT_PROVIDER",
    "LEGACY_CHECKSUMS",
    "CatalogDocument",
    "ProviderEntry",
    "VersionEntry",
]
