# chn/core/services/event_journal.py

import logging
import threading
import time
from collections import deque
from typing import Deque, Dict, Any, List

from chn.core.models.block import Block
from chn.core.models.block_header import BlockHeader

logger = logging.getLogger(__name__)

class EventJournal:
    """
    Suscriptor que guarda los últimos N eventos emitidos (para operadores / API).
    Se escribe desde el hilo de sondeo y se lee desde la API: por eso el lock.
    """

    EVENT_BLOCK_ADDED = "BLOCK_ADDED"
    EVENT_REORG = "REORG"

    def __init__(self, max_size: int = 500) -> None:
        self._events: Deque[Dict[str, Any]] = deque(maxlen=max_size)
        self._lock = threading.Lock()
        self._sequence = 0

    def on_block_added(self, block: Block) -> None:
        self._record(self.EVENT_BLOCK_ADDED, block.header, tx_count=len(block.transactions))

    def on_reorg(self, header: BlockHeader) -> None:
        self._record(self.EVENT_REORG, header)

    def recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Eventos más recientes, en orden de emisión."""
        with self._lock:
            events = list(self._events)
        return events[-limit:] if limit > 0 else []

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _record(self, kind: str, header: BlockHeader, tx_count: int = 0) -> None:
        with self._lock:
            self._sequence += 1
            self._events.append({
                "sequence": self._sequence,
                "type": kind,
                "hash": header.hash,
                "previous_hash": header.previous_hash,
                "height": header.height,
                "tx_count": tx_count,
                "recorded_at": time.time()
            })
