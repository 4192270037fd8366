"""
Spin repository (persistence).

Flat-file store for SpinRecord entities. The whole collection is read and
rewritten on every admission; there are no partial updates.

This module does not enforce business rules (e.g., one spin per email); it
only loads, saves and looks up records. Callers that need an atomic
check-and-create hold `locked()` around the sequence.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence

from domain.errors import StorageReadError, StorageWriteError
from domain.spin import SpinRecord

logger = logging.getLogger(__name__)


class SpinRepository:
    """
    JSON file backed collection of spin records.

    The file holds a single JSON array of record objects in storage order.
    A missing or corrupt file is treated as empty and reinitialized.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Serialize a read-check-write sequence within this process."""
        with self._lock:
            yield

    def _read(self) -> List[SpinRecord]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageReadError(f"Failed to read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StorageReadError(f"Expected a JSON array in {self.path}, got {type(data).__name__}")

        try:
            return [SpinRecord.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageReadError(f"Malformed spin record in {self.path}: {e}") from e

    def load_all(self) -> List[SpinRecord]:
        """
        Return every persisted record in storage order.

        Never raises: a missing, unreadable or corrupt file is logged,
        reinitialized to an empty collection, and reported as empty.
        """
        if not self.path.exists():
            logger.info(f"Spin store {self.path} does not exist, initializing empty store")
            self._reinitialize()
            return []

        try:
            return self._read()
        except StorageReadError as e:
            logger.warning(
                "Spin store unreadable, reinitializing as empty",
                extra={"path": str(self.path), "error": str(e)},
            )
            self._reinitialize()
            return []

    def _reinitialize(self) -> None:
        try:
            self.save_all([])
        except StorageWriteError as e:
            logger.error(f"Could not reinitialize spin store: {e}")

    def save_all(self, records: Sequence[SpinRecord]) -> None:
        """
        Persist the full collection, replacing prior content.

        Raises:
            StorageWriteError: If the file or its directory is not writable
        """
        payload: List[dict[str, Any]] = [record.to_dict() for record in records]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                    f.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error(f"Failed to save {len(payload)} spin records to {self.path}: {e}")
            raise StorageWriteError(f"Failed to write {self.path}: {e}") from e

        logger.debug(f"Saved {len(payload)} spin records to {self.path}")

    def find_by_email(
        self,
        email: str,
        records: Optional[Sequence[SpinRecord]] = None,
    ) -> Optional[SpinRecord]:
        """
        Case-sensitive exact match on email.

        Searches `records` when given (an already loaded collection),
        otherwise loads the store. Returns the first match; duplicates are
        tolerated.
        """
        if records is None:
            records = self.load_all()
        for record in records:
            if record.email == email:
                return record
        return None

    @staticmethod
    def next_id(records: Sequence[SpinRecord]) -> int:
        """max(ids) + 1, or 1 for an empty collection."""
        if not records:
            return 1
        return max(record.id for record in records) + 1


__all__ = ["SpinRepository"]
