import importlib.metadata

# ---------------------------------------------------------------------------
# Version metadata
# ---------------------------------------------------------------------------
# In-tree execution (tests without an install) has no distribution metadata;
# fall back to a neutral placeholder.
try:  # pragma: no cover - trivial guard
    try:
        __version__ = importlib.metadata.version("box-deployer")
    except KeyError:  # metadata object exists but lacks 'Version' key
        __version__ = "0.0.0"
except importlib.metadata.PackageNotFoundError:  # distribution not installed
    __version__ = "0.0.0"

__all__ = ["__version__"]
