"""Freshers Notifier — Dedup Store.

Remembers the canonical URL of every posting already broadcast, so a
restart does not announce the same posting twice. State lives in a
single JSON file holding an array of URLs:

    ["https://freshershunt.in/acme-hiring-2024", ...]

The file is read in full at startup and rewritten in full after each
new posting. Storage faults are logged and never stop the bot: a read
fault starts with an empty set, a write fault only risks one duplicate
broadcast after the next restart.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)


class DedupStore:
    """File-backed set of already-delivered posting keys.

    Attributes:
        path: Location of the JSON state file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._keys: set[str] = set()

    def load(self) -> set[str]:
        """Load the persisted keys, creating an empty store if none exists.

        Returns:
            A copy of the in-memory key set after loading.
        """
        if not self.path.exists():
            logger.info("No dedup store at %s, creating an empty one", self.path)
            self._keys = set()
            self.flush()
            return set(self._keys)

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            self._keys = {str(key) for key in data}
        except (OSError, ValueError) as e:
            logger.error(
                "Failed to read dedup store %s: %s. Continuing with an empty set",
                self.path, e,
            )
            self._keys = set()
            return set()

        logger.info("Loaded %d seen posting(s) from %s", len(self._keys), self.path)
        return set(self._keys)

    def contains(self, key: str) -> bool:
        """Whether key has already been recorded."""
        return key in self._keys

    def add(self, key: str) -> None:
        """Record key in memory. Call flush() to persist."""
        self._keys.add(key)

    def flush(self) -> bool:
        """Atomically replace the state file with the current key set.

        Writes a complete snapshot to a temporary file in the same
        directory, then renames it over the store.

        Returns:
            True if the snapshot was written, False on failure.
        """
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(sorted(self._keys), f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error("Failed to write dedup store %s: %s", self.path, e)
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            return False

        logger.debug("Dedup store flushed: %d key(s)", len(self._keys))
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
