# chn/tests/unit/test_notifier_node.py
import sys
import os
import unittest
from unittest.mock import MagicMock, patch

# --- AJUSTE DE RUTA ---
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, '../../..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from chn.core.nodes.notifier_node import NotifierNode
from chn.core.factories.node_factory import NodeFactory
from chn.core.config.config_manager import ConfigManager
from chn.core.managers.chain_window_tracker import ChainWindowTracker
from chn.core.managers.polling_driver import PollingDriver
from chn.core.services.event_journal import EventJournal
from chn.infra.network.block_inv_listener import BlockInvListener
from chn.infra.rpc.bitcoin_rpc_client import BitcoinRpcClient

class TestNotifierNode(unittest.TestCase):

    def setUp(self):
        self.manager = MagicMock()
        self.tracker = self.manager.tracker
        self.driver = self.manager.driver
        self.listener = self.manager.listener
        self.journal = EventJournal()

        self.tracker.tip = None
        self.tracker.window_snapshot.return_value = ()
        self.driver.is_running = True
        self.driver.status = "aa" * 32
        self.driver.round_count = 3
        self.driver.consecutive_failures = 0
        self.driver.last_error = None
        self.listener.is_connected = True

        self.node = NotifierNode(self.tracker, self.driver, self.journal, self.listener, network="regtest")

    def test_journal_subscribes_to_tracker(self):
        print("\n>> Ejecutando: test_journal_subscribes_to_tracker...")

        self.tracker.register_block_handler.assert_called_once_with(self.journal.on_block_added)
        self.tracker.register_reorg_handler.assert_called_once_with(self.journal.on_reorg)
        print("[SUCCESS] Diario suscrito.")

    def test_start_and_stop_order(self):
        print(">> Ejecutando: test_start_and_stop_order...")

        self.node.start()
        self.node.stop()

        calls = [c[0] for c in self.manager.method_calls if c[0] in
                 ("listener.start", "driver.start", "driver.stop", "listener.stop")]
        self.assertEqual(calls, ["listener.start", "driver.start", "driver.stop", "listener.stop"])
        print("[SUCCESS] Orden de arranque y parada.")

    def test_trigger_delegates_to_driver(self):
        print(">> Ejecutando: test_trigger_delegates_to_driver...")

        self.node.trigger()
        self.driver.trigger_round.assert_called_once()
        print("[SUCCESS] Ronda forzada.")

    def test_status_snapshot(self):
        print(">> Ejecutando: test_status_snapshot...")

        status = self.node.get_status()

        self.assertEqual(status["network"], "regtest")
        self.assertTrue(status["running"])
        self.assertEqual(status["best_block_hash"], "aa" * 32)
        self.assertIsNone(status["tip_hash"])
        self.assertEqual(status["window_size"], 0)
        self.assertEqual(status["rounds"], 3)
        self.assertTrue(status["p2p_connected"])
        print("[SUCCESS] Estado consolidado.")

class TestNodeFactory(unittest.TestCase):

    def setUp(self):
        setattr(ConfigManager, "_instance", None)

    def tearDown(self):
        setattr(ConfigManager, "_instance", None)

    def test_builds_full_graph_with_p2p(self):
        print("\n>> Ejecutando: test_builds_full_graph_with_p2p...")

        env = {"CHN_NETWORK": "regtest", "CHN_P2P_ENABLED": "true", "CHN_GENESIS_HASH": ""}
        with patch.dict(os.environ, env):
            node = NodeFactory.create_notifier_node()

        self.assertIsInstance(node.tracker, ChainWindowTracker)
        self.assertIsInstance(node.driver, PollingDriver)
        self.assertIsInstance(node.journal, EventJournal)
        self.assertIsInstance(node.listener, BlockInvListener)
        self.assertIsInstance(node.tracker._source, BitcoinRpcClient)
        self.assertEqual(node.network, "regtest")
        self.assertFalse(node.driver.is_running)
        print("[SUCCESS] Grafo completo ensamblado.")

    def test_p2p_disabled_builds_without_listener(self):
        print(">> Ejecutando: test_p2p_disabled_builds_without_listener...")

        env = {"CHN_NETWORK": "main", "CHN_P2P_ENABLED": "false", "CHN_GENESIS_HASH": ""}
        with patch.dict(os.environ, env):
            node = NodeFactory.create_notifier_node()

        self.assertIsNone(node.listener)
        self.assertFalse(node.get_status()["p2p_connected"])
        print("[SUCCESS] Modo solo sondeo.")

    def test_unknown_network_fails_fast(self):
        print(">> Ejecutando: test_unknown_network_fails_fast...")

        env = {"CHN_NETWORK": "mi-red", "CHN_GENESIS_HASH": ""}
        with patch.dict(os.environ, env):
            with self.assertRaises(ValueError):
                NodeFactory.create_notifier_node()
        print("[SUCCESS] Red desconocida rechazada.")

if __name__ == "__main__":
    unittest.main()
