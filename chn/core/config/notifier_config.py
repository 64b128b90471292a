# chn/core/config/notifier_config.py

import os
from typing import Dict, Any

class NotifierConfig:
    """
    Parámetros del seguimiento de la cadena.
    """
    def __init__(self) -> None:
        self._poll_period_sec: float = float(os.getenv("CHN_POLL_PERIOD_SEC", 7))
        # Tope de seguridad de profundidad de reorg, no de tamaño de ventana
        self._max_reorg_depth: int = int(os.getenv("CHN_MAX_REORG_DEPTH", 100))
        self._event_journal_size: int = int(os.getenv("CHN_EVENT_JOURNAL_SIZE", 500))

    @property
    def poll_period_sec(self) -> float: return self._poll_period_sec
    @property
    def max_reorg_depth(self) -> int: return self._max_reorg_depth
    @property
    def event_journal_size(self) -> int: return self._event_journal_size

    def update_from_dict(self, data: Dict[str, Any]) -> None:
        if not data: return

        if "poll_period_sec" in data:
            self._poll_period_sec = float(data["poll_period_sec"])

        if "max_reorg_depth" in data:
            self._max_reorg_depth = int(data["max_reorg_depth"])

        if "event_journal_size" in data:
            self._event_journal_size = int(data["event_journal_size"])
