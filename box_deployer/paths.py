"""Repository layout for published boxes.

For an artifact named ``myapp`` published into repository root ``/r``:

    /r/myapp/boxes/myapp-1.2.img   copied artifact
    /r/myapp/myapp.json            catalog document

Construction is side-effect free; call :meth:`RepositoryPaths.ensure_dirs`
to create the directories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

ARTIFACT_SUBDIR = "boxes"
CATALOG_SUFFIX = ".json"


@dataclass
class RepositoryPaths:
    """Resolve the artifact directory and catalog file for one artifact name.

    Parameters
    ----------
    repo : Path | str
        Repository root directory.
    name : str
        Artifact name (catalog key).

    Attributes
    ----------
    artifact_root : Path
        ``<repo>/<name>``.
    box_dir : Path
        ``<repo>/<name>/boxes``.
    catalog_path : Path
        ``<repo>/<name>/<name>.json``.
    """

    repo: Path | str
    name: str

    artifact_root: Path = field(init=False)
    box_dir: Path = field(init=False)
    catalog_path: Path = field(init=False)

    def __post_init__(self) -> None:
        root = Path(self.repo).expanduser().resolve()
        self.artifact_root = root / self.name
        self.box_dir = self.artifact_root / ARTIFACT_SUBDIR
        self.catalog_path = self.artifact_root / f"{self.name}{CATALOG_SUFFIX}"

    def artifact_path(self, filename: str) -> Path:
        return self.box_dir / filename

    def ensure_dirs(self) -> RepositoryPaths:
        """Create ``box_dir`` (and the artifact root) if missing."""
        self.box_dir.mkdir(parents=True, exist_ok=True)
        return self


def provider_url(base_url: str, filename: str) -> str:
    """Return ``<base_url>/boxes/<filename>`` without doubled slashes."""
    return f"{base_url.rstrip('/')}/{ARTIFACT_SUBDIR}/{filename}"


__all__ = ["ARTIFACT_SUBDIR", "RepositoryPaths", "provider_url"]
