"""
Flat-file JSON persistence for record collections.

Every save serializes the whole collection and overwrites the target file.
There is no append format and no write-ahead staging, so a crash mid-write
can leave a truncated file; the next load then starts empty. Concurrent
writers race and the last one wins.
"""

from pathlib import Path
from typing import Generic, TypeVar

from loguru import logger
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as RecordValidationError

from smart_invest.core.exceptions.portfolio import PersistenceError


R = TypeVar("R", bound=BaseModel)


class JsonCollectionFile(Generic[R]):
    """One JSON array of records stored in one file."""

    def __init__(self, path: Path, record_type: type[R]) -> None:
        self.path = Path(path)
        self.record_type = record_type
        self._adapter: TypeAdapter[list[R]] = TypeAdapter(list[record_type])  # type: ignore[valid-type]

    def load(self) -> list[R]:
        """Read all records; a missing or unreadable file yields an empty list."""
        if not self.path.exists():
            logger.info(f"No existing {self.path.name} found, starting fresh")
            return []

        try:
            records = self._adapter.validate_json(self.path.read_bytes())
        except OSError as e:
            logger.warning(f"Could not read {self.path.name}, starting fresh: {e}")
            return []
        except RecordValidationError as e:
            logger.warning(
                f"Malformed {self.path.name} ({e.error_count()} errors), starting fresh"
            )
            return []

        logger.debug(f"Loaded {len(records)} records from {self.path}")
        return records

    def save(self, records: list[R]) -> None:
        """Overwrite the file with the full collection.

        Raises:
            PersistenceError: If the directory or file cannot be written
        """
        payload = self._adapter.dump_json(records, by_alias=True, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(payload)
        except OSError as e:
            logger.error(f"Error saving {self.path.name}: {e}")
            raise PersistenceError(f"Failed to save {self.path.name}", path=str(self.path)) from e

        logger.debug(f"Saved {len(records)} records to {self.path}")
