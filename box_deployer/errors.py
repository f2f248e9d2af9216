"""Exception hierarchy for publishing artifacts into a box repository.

Validation failures (parameters, paths, URL, filename) are detected before any
filesystem mutation and are handed back as values by
:func:`box_deployer.parameters.validate_request`. I/O and serialization
failures are raised while publishing and trigger compensation of the copied
artifact.
"""

from __future__ import annotations

__all__ = [
    "DeployerError",
    "ParameterError",
    "PathNotFoundError",
    "InvalidUrlError",
    "MalformedFilenameError",
    "MissingVersionError",
    "ArtifactIOError",
    "SerializationError",
]


class DeployerError(Exception):
    """Base exception for every box-deployer failure."""


class ParameterError(DeployerError):
    """Raised for unknown keys, malformed ``key=value`` tokens or missing values."""


class PathNotFoundError(DeployerError):
    """Raised when the source artifact or repository directory does not exist."""


class InvalidUrlError(DeployerError):
    """Raised when the base download URL is not a valid absolute URL."""


class MalformedFilenameError(DeployerError):
    """Raised when a filename does not follow ``<name>-<version>.<ext>``."""


class MissingVersionError(DeployerError):
    """Raised when no version was supplied and none could be inferred."""


class ArtifactIOError(DeployerError):
    """Raised when the artifact cannot be read, copied or removed."""


class SerializationError(DeployerError):
    """Raised when a catalog document cannot be parsed or written."""
