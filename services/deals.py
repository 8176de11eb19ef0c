import logging
import threading

from services import merge
from services.storage import Storage

logger = logging.getLogger(__name__)


class DealService:
    """Read-modify-write over the deals file, one mutation at a time."""

    def __init__(self, storage: Storage):
        self.storage = storage
        self._lock = threading.Lock()

    def list_deals(self) -> list:
        return self.storage.read_all()

    def ingest(self, partial: dict):
        """Returns the merged deal and whether it was newly added."""
        with self._lock:
            deals = self.storage.read_all()
            created = merge.find_index(deals, partial.get("asin")) == -1
            merged, next_deals = merge.ingest(partial, deals)
            self.storage.write_all(next_deals)
        logger.info(f"Deal {merged['asin']} {'added' if created else 'updated'} ({merged['status']})")
        return merged, created

    def replace(self, deals) -> int:
        with self._lock:
            next_deals = merge.replace_all(deals)
            self.storage.write_all(next_deals)
        logger.info(f"Replaced deal collection with {len(next_deals)} deals")
        return len(next_deals)

    def clear(self):
        with self._lock:
            self.storage.clear()
        logger.info("Cleared all deals")
