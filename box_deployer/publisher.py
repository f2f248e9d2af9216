"""Publish an artifact into the repository and record it in the catalog.

The publish sequence is: create directories, copy the artifact to a hidden
staging file beside its destination, checksum it, reconcile the catalog,
then move the staged file onto the destination. Any failure before that
last move only discards the staged file, so a previously published artifact
of the same version stays in place and matches the untouched catalog. The
cleanup is best effort; a crash can still leave a stray ``.<file>.tmp``.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from .checksum import DEFAULT_CHUNK_SIZE, sha256_file
from .errors import ArtifactIOError, SerializationError
from .json_store import JsonCatalogStore
from .models import CatalogDocument
from .parameters import PublishRequest
from .paths import RepositoryPaths, provider_url
from .reconcile import CatalogReconciler, build_version_entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishResult:
    artifact_path: Path
    catalog_path: Path
    checksum: str
    document: CatalogDocument


def _same_file(a: Path, b: Path) -> bool:
    try:
        return b.exists() and a.samefile(b)
    except OSError:
        return False


def staging_path(destination: Path) -> Path:
    """Hidden sibling of ``destination`` that the artifact is copied to first."""
    return destination.with_name(f".{destination.name}.tmp")


def stage_artifact(source: Path, destination: Path) -> Path | None:
    """Copy ``source`` next to ``destination`` under a temporary name.

    Returns the staged path, or None when ``source`` already is
    ``destination``. A failed copy leaves neither a partial staged file nor a
    modified destination behind.
    """
    if _same_file(source, destination):
        logger.info("Artifact %s already in place, not copying", destination)
        return None
    staged = staging_path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, staged)
    except OSError as exc:
        _discard(staged)
        raise ArtifactIOError(f"Cannot copy {source} to {destination}: {exc}") from exc
    logger.debug("Staged %s as %s", source, staged)
    return staged


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove staged artifact %s: %s", path, exc)


def publish(
    request: PublishRequest, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> PublishResult:
    """Copy the requested artifact into the repository and upsert its catalog."""
    artifact = request.artifact
    paths = RepositoryPaths(request.repo, artifact.name)
    destination = paths.artifact_path(artifact.filename)
    try:
        paths.ensure_dirs()
    except OSError as exc:
        raise ArtifactIOError(
            f"Cannot create repository directory {paths.box_dir}: {exc}"
        ) from exc

    staged = stage_artifact(request.source, destination)
    try:
        checksum = sha256_file(request.source, chunk_size=chunk_size)
        try:
            entry = build_version_entry(
                artifact.version,
                request.provider,
                provider_url(request.base_url, artifact.filename),
                checksum,
            )
        except ValidationError as exc:
            raise SerializationError(f"Invalid catalog entry:\n{exc}") from exc
        reconciler = CatalogReconciler(JsonCatalogStore(paths.catalog_path))
        document = reconciler.reconcile(artifact.name, request.description, entry)
    except Exception:
        logger.error("Publishing %s failed", artifact.filename)
        if staged is not None:
            _discard(staged)
        raise

    if staged is not None:
        try:
            staged.replace(destination)
        except OSError as exc:
            _discard(staged)
            raise ArtifactIOError(
                f"Catalog {paths.catalog_path} updated but {destination} "
                f"could not be replaced: {exc}"
            ) from exc
        logger.info("Copied %s to %s", request.source, destination)

    return PublishResult(
        artifact_path=destination,
        catalog_path=paths.catalog_path,
        checksum=checksum,
        document=document,
    )


__all__ = ["PublishResult", "publish", "stage_artifact", "staging_path"]
