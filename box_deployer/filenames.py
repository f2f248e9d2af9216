"""Infer artifact name, version and extension from ``<name>-<version>.<ext>``.

The last ``-`` separates the name from the version and the last ``.`` marks
the extension, so names may contain dashes and versions may contain dots:

    >>> infer_artifact_name("debian-base-12.4.img")
    ArtifactName(name='debian-base', version='12.4', extension='img')

Explicit values always win over inferred ones. When a name is given nothing
is inferred from the filename and the version must be explicit as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import MalformedFilenameError, MissingVersionError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "img"
_SEPARATORS = ("/", "\\")


@dataclass(frozen=True)
class ArtifactName:
    """Effective catalog key and destination filename parts."""

    name: str
    version: str
    extension: str = DEFAULT_EXTENSION

    @property
    def filename(self) -> str:
        return f"{self.name}-{self.version}.{self.extension}"


def _given(value: str | None) -> str | None:
    """Normalise blank explicit values to None."""
    if value is None or value.strip() == "":
        return None
    return value


def _normalize_extension(extension: str | None) -> str | None:
    extension = _given(extension)
    if extension is None:
        return None
    # Callers often pass ".img"; the separator dot is added by ArtifactName.
    return _given(extension.lstrip("."))


def infer_artifact_name(
    path: str | Path,
    name: str | None = None,
    version: str | None = None,
    extension: str | None = None,
) -> ArtifactName:
    """Return the effective (name, version, extension) for ``path``.

    Parameters
    ----------
    path
        Artifact file path; only its base name is parsed.
    name, version, extension
        Explicit overrides. Blank strings count as not supplied.

    Raises
    ------
    MalformedFilenameError
        No name given and the base name has no ``-`` after its first
        character, or its last ``.`` is not after its last ``-``. Also
        raised when a part contains ``/`` or ``\\`` or the name is ``.``
        or ``..``.
    MissingVersionError
        The effective version is empty.
    """
    name = _given(name)
    version = _given(version)
    extension = _normalize_extension(extension)

    if name is None:
        filename = Path(path).name
        dash = filename.rfind("-")
        dot = filename.rfind(".")
        if dash < 1 or (dot >= 0 and dot <= dash):
            raise MalformedFilenameError(
                "'name' parameter not specified and file name without "
                f"'name-version.ext' format: {filename}"
            )
        end = dot if dot >= 0 else len(filename)
        if version is None:
            version = _given(filename[dash + 1 : end])
        if version is None:
            raise MissingVersionError(
                "'version' parameter not specified and file name without "
                f"'name-version.ext' format: {filename}"
            )
        if extension is None and dot >= 0:
            extension = _given(filename[dot + 1 :])
        name = filename[:dash]
        logger.debug(
            "Inferred name=%s version=%s extension=%s from %s",
            name,
            version,
            extension,
            filename,
        )
    elif version is None:
        raise MissingVersionError(
            f"'version' parameter is mandatory when 'name' is given ({name})"
        )

    artifact = ArtifactName(
        name=name,
        version=version,
        extension=extension if extension is not None else DEFAULT_EXTENSION,
    )
    _check_path_safe(artifact)
    return artifact


def _check_path_safe(artifact: ArtifactName) -> None:
    """Reject parts that would leave or nest the ``<repo>/<name>`` layout."""
    for field, value in (
        ("name", artifact.name),
        ("version", artifact.version),
        ("extension", artifact.extension),
    ):
        if any(sep in value for sep in _SEPARATORS):
            raise MalformedFilenameError(
                f"'{field}' must not contain a path separator: {value}"
            )
    if artifact.name in (".", ".."):
        raise MalformedFilenameError(f"'name' cannot be {artifact.name!r}")


__all__ = ["DEFAULT_EXTENSION", "ArtifactName", "infer_artifact_name"]
