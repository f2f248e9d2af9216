"""JSON persistence for catalog documents (authoritative storage)."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .errors import SerializationError
from .models import CatalogDocument

logger = logging.getLogger(__name__)


class JsonCatalogStore:
    """Read and write one catalog document at a fixed path.

    Writes replace the whole document through a temporary file in the same
    directory, so an interrupted write never leaves a truncated catalog.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    # Load --------------------------------------------------------------------
    def load(self) -> CatalogDocument:
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except ValueError as exc:  # JSONDecodeError, UnicodeDecodeError
            raise SerializationError(
                f"Catalog {self.path} is not valid JSON: {exc}"
            ) from exc
        except OSError as exc:
            raise SerializationError(f"Cannot read catalog {self.path}: {exc}") from exc
        try:
            document = CatalogDocument.from_json_dict(data)
        except ValidationError as exc:
            raise SerializationError(
                f"Catalog {self.path} does not match the catalog schema:\n{exc}"
            ) from exc
        logger.debug(
            "Loaded catalog %s (%d versions)", self.path, len(document.versions)
        )
        return document

    # Write -------------------------------------------------------------------
    def write(self, document: CatalogDocument) -> Path:
        payload = document.to_json_dict()
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                json.dump(payload, fh, indent=2, sort_keys=False)
                fh.write("\n")
            Path(tmp_name).replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise SerializationError(f"Cannot write catalog {self.path}: {exc}") from exc
        logger.debug("Wrote catalog %s", self.path)
        return self.path


__all__ = ["JsonCatalogStore"]
