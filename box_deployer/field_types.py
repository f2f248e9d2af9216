"""Reusable Annotated field type aliases for catalog models.

Keeping the field-level constraints here lets the parameter layer and the
catalog models share one definition of what a checksum, version or URL is.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, AnyUrl, Field, TypeAdapter, ValidationError

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
SHA256_PATTERN = r"^[0-9a-f]{64}$"
# Catalogs written by earlier deployers hex-encoded each digest byte without
# zero padding, giving 32 to 64 characters.
LEGACY_SHA256_PATTERN = r"^[0-9a-f]{32,64}$"

_URL_ADAPTER = TypeAdapter(AnyUrl)


def is_absolute_url(value: str) -> bool:
    """Return True when ``value`` parses as an absolute URL."""
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def _check_url(value: str) -> str:
    if not is_absolute_url(value):
        raise ValueError(f"Not a valid absolute URL: {value!r}")
    # Stored verbatim; AnyUrl would normalise the string (e.g. trailing slash).
    return value


# ---------------------------------------------------------------------------
# Annotated aliases
# ---------------------------------------------------------------------------
Checksum = Annotated[
    str,
    Field(
        description="Lowercase hex-encoded SHA-256 digest of the artifact.",
        examples=["3a7bd3e2360a3d29eea436fcfb7e44c735d117c42d1c1835420b6b9942dd4f1b"],
    ),
]

Version = Annotated[
    str,
    Field(description="Version string, unique within a catalog.", min_length=1),
]

ProviderName = Annotated[
    str,
    Field(
        description="Deployment backend identifier (e.g. virtualbox).",
        min_length=1,
        examples=["virtualbox", "libvirt"],
    ),
]

DownloadUrl = Annotated[
    str,
    AfterValidator(_check_url),
    Field(description="Absolute download location of the artifact."),
]

__all__ = [
    "LEGACY_SHA256_PATTERN",
    "SHA256_PATTERN",
    "Checksum",
    "DownloadUrl",
    "ProviderName",
    "Version",
    "is_absolute_url",
]
