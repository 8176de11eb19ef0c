import json
import logging
import os
import tempfile
from pathlib import Path

from services.errors import StorageError

logger = logging.getLogger(__name__)


class Storage:
    """Keeps the whole deal collection in a single pretty-printed JSON file."""

    def __init__(self, path):
        self.path = Path(path)

    def ensure_directory(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create {self.path.parent}: {e}") from e

    def read_all(self) -> list:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                deals = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable deals file {self.path}, treating as empty: {e}")
            return []
        if not isinstance(deals, list):
            logger.warning(f"Deals file {self.path} does not hold a list, treating as empty")
            return []
        return deals

    def write_all(self, deals: list):
        self.ensure_directory()
        # Write next to the target so os.replace stays on one filesystem
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".deals-", suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(deals, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.debug(f"Wrote {len(deals)} deals to {self.path}")

    def clear(self):
        self.write_all([])
