"""Parse ``key=value`` command-line tokens into a validated publish request.

Validation never raises for user input problems. Each check returns a
:class:`~box_deployer.errors.DeployerError` instance (or ``None``) and
:func:`validate_request` stops at the first one, so callers can report it
and exit before anything touches the filesystem.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .config import DeployerSettings
from .errors import (
    DeployerError,
    InvalidUrlError,
    MalformedFilenameError,
    MissingVersionError,
    ParameterError,
    PathNotFoundError,
)
from .field_types import is_absolute_url
from .filenames import ArtifactName, infer_artifact_name

logger = logging.getLogger(__name__)

VALID_PARAMETERS = frozenset(
    {
        "name",
        "description",
        "desc",
        "version",
        "extension",
        "ext",
        "url",
        "file",
        "path",
        "repo",
        "provider",
    }
)

# Preferred key first.
ALIASES: dict[str, tuple[str, ...]] = {
    "path": ("file", "path"),
    "description": ("desc", "description"),
    "extension": ("ext", "extension"),
}

_QUOTES = ("'", '"')

USAGE = """\
Example of valid parameters are:

name=artifact_name description/desc=artifact_description \\
version=1.0 ext/extension=img \\
url=http://my.repository.com/ \\
file/path=/path/to/artifact \\
repo=/path/to/repo/dir \\
provider=virtualbox"""


class PublishRequest(BaseModel):
    """Fully validated inputs for one publish run."""

    model_config = ConfigDict(frozen=True)

    source: Path
    repo: Path
    base_url: str
    artifact: ArtifactName
    description: str | None = None
    provider: str


@dataclass(frozen=True)
class RequestValidation:
    request: PublishRequest | None = None
    error: DeployerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.request is not None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_parameters(tokens: Iterable[str]) -> dict[str, str]:
    """Split tokens on their first ``=`` and check keys against the whitelist.

    Raises
    ------
    ParameterError
        A token has no ``=``, an empty key or value, or an unknown key.
    """
    params: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key or not value:
            raise ParameterError(f"Malformed parameter {token!r}; expected key=value")
        if key not in VALID_PARAMETERS:
            raise ParameterError(f"Wrong parameter {key}")
        if key in ALIASES["description"]:
            value = _unquote(value)
        params[key] = value
    return params


def resolve(params: Mapping[str, str], key: str) -> str | None:
    """Return the value for ``key`` honouring alias precedence."""
    for alias in ALIASES.get(key, (key,)):
        if alias in params:
            return params[alias]
    return None


def _blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


# Individual checks -----------------------------------------------------------
def check_source(path: str | None) -> DeployerError | None:
    if _blank(path):
        return ParameterError("'path' parameter is mandatory.")
    if not Path(path).is_file():  # type: ignore[arg-type]
        return PathNotFoundError(f"File {path} not found!")
    return None


def check_repo(repo: str | None) -> DeployerError | None:
    if _blank(repo):
        return ParameterError("'repo' parameter is mandatory.")
    if not Path(repo).is_dir():  # type: ignore[arg-type]
        return PathNotFoundError(f"Repo {repo} not found!")
    return None


def check_url(url: str | None) -> DeployerError | None:
    if _blank(url):
        return ParameterError("'url' parameter is mandatory.")
    if not is_absolute_url(url.strip()):  # type: ignore[union-attr]
        return InvalidUrlError(f"Malformed 'url' parameter {url}")
    return None


def check_artifact(
    params: Mapping[str, str], source: str
) -> ArtifactName | DeployerError:
    try:
        return infer_artifact_name(
            source,
            name=resolve(params, "name"),
            version=resolve(params, "version"),
            extension=resolve(params, "extension"),
        )
    except (MalformedFilenameError, MissingVersionError) as exc:
        return exc


def validate_request(
    tokens: Iterable[str], settings: DeployerSettings | None = None
) -> RequestValidation:
    """Turn command-line tokens into a :class:`PublishRequest` or an error."""
    settings = settings or DeployerSettings()
    try:
        params = parse_parameters(tokens)
    except ParameterError as exc:
        return RequestValidation(error=exc)

    source = resolve(params, "path")
    repo = resolve(params, "repo")
    url = resolve(params, "url")
    for error in (check_source(source), check_repo(repo), check_url(url)):
        if error is not None:
            return RequestValidation(error=error)

    artifact = check_artifact(params, source)  # type: ignore[arg-type]
    if isinstance(artifact, DeployerError):
        return RequestValidation(error=artifact)

    provider = resolve(params, "provider")
    request = PublishRequest(
        source=Path(source),  # type: ignore[arg-type]
        repo=Path(repo),  # type: ignore[arg-type]
        base_url=url.strip(),  # type: ignore[union-attr]
        artifact=artifact,
        description=resolve(params, "description"),
        provider=provider if not _blank(provider) else settings.default_provider,
    )
    logger.debug("Validated publish request: %s", request)
    return RequestValidation(request=request)


__all__ = [
    "ALIASES",
    "USAGE",
    "VALID_PARAMETERS",
    "PublishRequest",
    "RequestValidation",
    "check_repo",
    "check_source",
    "check_url",
    "parse_parameters",
    "resolve",
    "validate_request",
]
