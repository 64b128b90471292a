# chn/tests/e2e/test_api_notifier.py
import sys
import os
import unittest
from fastapi.testclient import TestClient

# --- AJUSTE DE RUTAS ---
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, '../../..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from chn.interface.api.server import app
from chn.interface.api.dependencies import NodeContainer
from chn.core.nodes.notifier_node import NotifierNode
from chn.core.managers.chain_window_tracker import ChainWindowTracker
from chn.core.managers.polling_driver import PollingDriver
from chn.core.services.event_journal import EventJournal
from chn.tests.mocks.mock_chain_source import MockChainSource

class TestApiNotifier(unittest.TestCase):
    """
    API contra un notificador real alimentado por un RPC simulado.
    El nodo se inyecta antes de crear el cliente, así el lifespan no fabrica otro.
    """

    def setUp(self):
        NodeContainer.shutdown()

        self.source = MockChainSource()
        self.genesis = self.source.make_block(None)
        self.tracker = ChainWindowTracker(self.source, self.genesis.hash)
        # Driver sin arrancar: las rondas se ejecutan a mano con run_round()
        self.driver = PollingDriver(self.tracker, period_sec=60)
        self.journal = EventJournal(max_size=50)
        self.node = NotifierNode(self.tracker, self.driver, self.journal, network="regtest")

        NodeContainer.set_instance(self.node)
        self.client = TestClient(app)

    def tearDown(self):
        NodeContainer.shutdown()

    def test_full_api_flow(self):
        print("\n==============================================")
        print("   TEST E2E: API DEL NOTIFICADOR              ")
        print("==============================================\n")

        # 1. Cadena principal de 3 bloques
        main = self.source.make_chain(self.genesis, 3)
        for block in main:
            self.source.set_best(block)
            self.assertTrue(self.driver.run_round())

        print("[1] Consultando GET /status...")
        response = self.client.get("/status")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["network"], "regtest")
        self.assertEqual(data["tip_hash"], main[-1].hash)
        self.assertEqual(data["tip_height"], 3)
        self.assertEqual(data["window_size"], 3)
        self.assertEqual(data["rounds"], 3)
        self.assertFalse(data["p2p_connected"])

        # 2. Reorg de un bloque
        print("[2] Provocando reorg y consultando GET /window...")
        fork = self.source.make_block(main[1], tag="fork")
        self.source.set_best(fork)
        self.assertTrue(self.driver.run_round())

        response = self.client.get("/window")
        self.assertEqual(response.status_code, 200)
        window = response.json()
        self.assertEqual(window["size"], 3)
        self.assertEqual([h["hash"] for h in window["headers"]], [main[0].hash, main[1].hash, fork.hash])

        # 3. Diario de eventos
        print("[3] Consultando GET /events...")
        response = self.client.get("/events", params={"limit": 2})
        self.assertEqual(response.status_code, 200)
        events = response.json()
        self.assertEqual([(e["type"], e["hash"]) for e in events],
                         [(EventJournal.EVENT_REORG, main[2].hash), (EventJournal.EVENT_BLOCK_ADDED, fork.hash)])

        response = self.client.get("/events", params={"limit": 0})
        self.assertEqual(response.status_code, 422)

        # 4. Ronda forzada
        print("[4] POST /trigger...")
        response = self.client.post("/trigger")
        self.assertEqual(response.status_code, 202)
        self.assertEqual(response.json()["status"], "scheduled")

        print("\n[SUCCESS] API del notificador verificada.")

    def test_status_fails_without_node(self):
        print(">> Ejecutando: test_status_fails_without_node...")

        NodeContainer.shutdown()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/status")
        self.assertEqual(response.status_code, 500)
        print("[SUCCESS] Sin nodo inyectado la API falla de forma explícita.")

if __name__ == "__main__":
    unittest.main()
