from __future__ import annotations
import logging
import threading
from collections import OrderedDict
from typing import Optional

from policy_monitor.services.scoring_service import ScoringResult

logger = logging.getLogger(__name__)


class ResultStore:
    """
    In-memory, bounded (LRU) holder of recent scoring results so the views
    and the download can be served after the upload. Nothing is persisted.
    """

    def __init__(self, max_size: int = 32):
        self.max_size = max(1, max_size)
        self._items: "OrderedDict[str, ScoringResult]" = OrderedDict()
        self._lock = threading.Lock()

    def put(self, result: ScoringResult) -> str:
        with self._lock:
            self._items[result.result_id] = result
            self._items.move_to_end(result.result_id)
            while len(self._items) > self.max_size:
                evicted, _ = self._items.popitem(last=False)
                logger.info(f"🗑️ Evicted scoring result {evicted}")
        return result.result_id

    def get(self, result_id: str) -> Optional[ScoringResult]:
        with self._lock:
            result = self._items.get(result_id)
            if result is not None:
                self._items.move_to_end(result_id)
            return result

    def __len__(self) -> int:
        return len(self._items)
