# chn/core/factories/node_factory.py

import logging
from typing import Optional

from chn.core.config.config_manager import ConfigManager
from chn.core.managers.chain_window_tracker import ChainWindowTracker
from chn.core.managers.polling_driver import PollingDriver
from chn.core.services.event_journal import EventJournal
from chn.core.nodes.notifier_node import NotifierNode
from chn.infra.rpc.bitcoin_rpc_client import BitcoinRpcClient
from chn.infra.network.block_inv_listener import BlockInvListener

logger = logging.getLogger(__name__)

class NodeFactory:
    """
    Fábrica del notificador.
    Encapsula la construcción del grafo de dependencias a partir de la configuración.
    """

    @staticmethod
    def create_notifier_node(config: Optional[ConfigManager] = None) -> NotifierNode:
        try:
            config = config or ConfigManager()
            logger.info(f"🏭 NodeFactory: Fabricando notificador para la red '{config.network.network}'...")

            # 1. Fuente de datos (RPC)
            rpc_client = BitcoinRpcClient(config.rpc)

            # 2. Núcleo
            tracker = ChainWindowTracker(
                chain_source=rpc_client,
                genesis_hash=config.genesis_hash,
                max_reorg_depth=config.max_reorg_depth
            )

            # 3. Avisos P2P (opcionales)
            listener: Optional[BlockInvListener] = None
            if config.network.p2p_enabled:
                listener = BlockInvListener(config.network)

            # 4. Planificación
            driver = PollingDriver(tracker, config.poll_period_sec, signal_source=listener)
            journal = EventJournal(config.notifier.event_journal_size)

            node = NotifierNode(tracker, driver, journal, listener, network=config.network.network)
            logger.info("Notificador ensamblado.")
            return node

        except Exception:
            logger.exception("Fallo al ensamblar el notificador")
            raise
