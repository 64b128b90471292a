# chn/core/nodes/notifier_node.py

import logging
from typing import Dict, Any, Optional

from chn.core.managers.chain_window_tracker import ChainWindowTracker
from chn.core.managers.polling_driver import PollingDriver
from chn.core.services.event_journal import EventJournal
from chn.infra.network.block_inv_listener import BlockInvListener

logger = logging.getLogger(__name__)

class NotifierNode:
    """
    [Notificador de Cadena]
    Ensambla rastreador + driver de sondeo + listener P2P y expone un ciclo de vida único.
    Los consumidores se suscriben al rastreador (bloque añadido / reorg).
    """

    def __init__(
        self,
        tracker: ChainWindowTracker,
        driver: PollingDriver,
        journal: EventJournal,
        listener: Optional[BlockInvListener] = None,
        network: str = "main"
    ) -> None:
        self.tracker = tracker
        self.driver = driver
        self.journal = journal
        self.listener = listener
        self._network = network

        self.tracker.register_block_handler(self.journal.on_block_added)
        self.tracker.register_reorg_handler(self.journal.on_reorg)

        logger.info(f"🛰️  NODO NOTIFICADOR INICIALIZADO | Red: {network} | P2P: {'SÍ' if listener else 'NO'}")

    @property
    def network(self) -> str:
        return self._network

    def start(self) -> None:
        logger.info("🌐 Iniciando notificador de cadena...")
        if self.listener:
            self.listener.start()
        self.driver.start()

    def stop(self) -> None:
        logger.info("🛑 Deteniendo notificador de cadena...")
        # Primero el driver: se desuscribe del listener y deja terminar la ronda en curso
        self.driver.stop()
        if self.listener:
            self.listener.stop()

    def trigger(self) -> None:
        self.driver.trigger_round()

    def get_status(self) -> Dict[str, Any]:
        tip = self.tracker.tip
        return {
            "network": self._network,
            "running": self.driver.is_running,
            "best_block_hash": self.driver.status,
            "tip_hash": tip.hash if tip else None,
            "tip_height": tip.height if tip else None,
            "window_size": len(self.tracker.window_snapshot()),
            "rounds": self.driver.round_count,
            "consecutive_failures": self.driver.consecutive_failures,
            "last_error": self.driver.last_error,
            "p2p_connected": self.listener.is_connected if self.listener else False
        }
