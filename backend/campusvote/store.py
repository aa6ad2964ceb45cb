from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Union

from pydantic import ValidationError as SchemaError

from campusvote.core.logger import election_logger as logger
from campusvote.errors import PersistenceError
from campusvote.models import ElectionDocument


class RecordStore:
    """
    JSON-file backed store holding the entire election database.

    Every call to ``load`` re-reads the file; nothing is cached between calls.
    A missing, empty or corrupt file is treated as a first run and yields an
    empty document instead of an error.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> ElectionDocument:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ElectionDocument()
        except UnicodeDecodeError as exc:
            logger.warning(f"Corrupt data file {self.path}: {exc}; using empty document")
            return ElectionDocument()
        except OSError as exc:
            logger.warning(f"Could not read {self.path}: {exc}; using empty document")
            return ElectionDocument()

        if not raw.strip():
            return ElectionDocument()
        try:
            return ElectionDocument.model_validate(json.loads(raw))
        except (json.JSONDecodeError, RecursionError, SchemaError) as exc:
            logger.warning(f"Corrupt data file {self.path}: {exc}; using empty document")
            return ElectionDocument()

    def save(self, doc: ElectionDocument) -> None:
        payload = doc.model_dump_json(by_alias=True, indent=2)
        temp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", delete=False, dir=str(self.path.parent), suffix=".tmp"
            ) as tmp_file:
                temp_name = tmp_file.name
                tmp_file.write(payload)
            os.replace(temp_name, self.path)
        except OSError as exc:
            if temp_name:
                Path(temp_name).unlink(missing_ok=True)
            logger.error(f"Failed to save {self.path}: {exc}")
            raise PersistenceError("Could not save election data.") from exc


__all__ = ["RecordStore"]
