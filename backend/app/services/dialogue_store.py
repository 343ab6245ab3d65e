"""Dialogue store - whole-document read and overwrite of the dialogue JSON file."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from app.config import settings
from app.core.errors import DocumentParseError, StorageError
from app.schemas.dialogue import Document, dump_document, parse_document

logger = logging.getLogger(__name__)


class DialogueStore:
    """Loads and saves one dialogue document. No partial updates, no locking."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Document:
        """Read and validate the whole document.

        Raises:
            StorageError: the file could not be read.
            DocumentParseError: the file is not JSON or not a mapping of records.
        """
        logger.info("Reading dialogue file: %s", self.path)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise DocumentParseError(f"Malformed dialogue file {self.path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read dialogue file {self.path}: {e}") from e

        try:
            document = parse_document(raw)
        except ValidationError as e:
            raise DocumentParseError(f"Invalid dialogue document {self.path}: {e}") from e

        logger.info("Loaded %d dialogue nodes", len(document))
        return document

    def save(self, document: Document) -> None:
        """Overwrite the file with the given document.

        Raises:
            StorageError: the file could not be written.
        """
        logger.info("Saving dialogue file: %s", self.path)
        data = json.dumps(dump_document(document), indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(data)
        except OSError as e:
            raise StorageError(f"Could not write dialogue file {self.path}: {e}") from e
        logger.info("Dialogue file saved successfully")


def get_dialogue_store() -> DialogueStore:
    """FastAPI dependency that returns the store for the configured file."""
    return DialogueStore(settings.DIALOGUE_FILE)
