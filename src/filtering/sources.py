"""Record sources: where the in-memory record set comes from.

The store only depends on the `RecordSource` protocol, so tests can run
against fixed fixtures and deployments can swap in another loader.
"""

import json
from pathlib import Path
from typing import Iterable, Protocol, Tuple, Union

from config.logging_config import get_logger
from src.filtering.exceptions import RecordSourceError, RecordValidationError
from src.filtering.models import Record

logger = get_logger("sources")


class RecordSource(Protocol):
    """Anything that can deliver a fully materialized record set."""

    def load(self) -> Tuple[Record, ...]:
        ...


class StaticRecordSource:
    """Serves records that are already in memory."""

    def __init__(self, records: Iterable[Record]):
        self._records = tuple(records)

    def load(self) -> Tuple[Record, ...]:
        return self._records


class JsonRecordSource:
    """Loads records from a JSON file holding an array of wire-shaped records."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Tuple[Record, ...]:
        """
        Read and validate every record in the file.

        Returns:
            Tuple of records in file order.

        Raises:
            RecordSourceError: If the file is missing, unreadable, not a JSON
                array, or contains an invalid record.
        """
        if not self.path.exists():
            raise RecordSourceError(f"Record file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise RecordSourceError(f"Error parsing {self.path}: {e}")
        except OSError as e:
            raise RecordSourceError(f"Error reading {self.path}: {e}")

        if not isinstance(payload, list):
            raise RecordSourceError(f"Expected a JSON array of records in {self.path}")

        records = []
        for index, item in enumerate(payload):
            if not isinstance(item, dict):
                raise RecordSourceError(f"Record at index {index} in {self.path} is not an object")
            try:
                records.append(Record.from_dict(item))
            except RecordValidationError as e:
                raise RecordSourceError(f"Invalid record at index {index} in {self.path}: {e}")

        logger.info(f"Loaded {len(records)} records from {self.path}")
        return tuple(records)
