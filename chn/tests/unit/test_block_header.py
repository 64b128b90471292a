# chn/tests/unit/test_block_header.py
import sys
import os
import unittest

# --- AJUSTE DE RUTA ---
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, '../../..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from chn.core.models.block_header import BlockHeader, NULL_HASH
from chn.core.models.block import Block
from chn.core.services.block_hasher import BlockHasher

# Bloque génesis de la red principal (valores públicos)
GENESIS_JSON = {
    "hash": "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f",
    "height": 0,
    "version": 1,
    "merkleroot": "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b",
    "time": 1231006505,
    "bits": "1d00ffff",
    "nonce": 2083236893,
    "tx": ["4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"]
}

class TestBlockHeader(unittest.TestCase):

    def test_genesis_hash_matches_network(self):
        print("\n>> Ejecutando: test_genesis_hash_matches_network...")

        header = BlockHeader.from_dict(GENESIS_JSON)

        self.assertEqual(header.previous_hash, NULL_HASH)
        self.assertEqual(header.hash, GENESIS_JSON["hash"])
        print("[SUCCESS] Hash del génesis reproducido.")

    def test_serialization_is_80_bytes(self):
        print(">> Ejecutando: test_serialization_is_80_bytes...")

        header = BlockHeader.from_dict(GENESIS_JSON)
        raw = BlockHasher.serialize(header)

        self.assertEqual(len(raw), BlockHasher.HEADER_SIZE)
        # Versión 1 little-endian al inicio
        self.assertEqual(raw[:4], b'\x01\x00\x00\x00')
        print("[SUCCESS] Serialización canónica.")

    def test_equality_is_by_hash_only(self):
        print(">> Ejecutando: test_equality_is_by_hash_only...")

        a = BlockHeader.from_dict(GENESIS_JSON)
        b = BlockHeader.from_dict({**GENESIS_JSON, "height": 999})
        c = BlockHeader.from_dict({**GENESIS_JSON, "nonce": 1})

        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, c)
        self.assertEqual(len({a, b, c}), 2)
        print("[SUCCESS] Identidad por hash.")

    def test_invalid_hash_field_raises(self):
        print(">> Ejecutando: test_invalid_hash_field_raises...")

        header = BlockHeader.from_dict({**GENESIS_JSON, "merkleroot": "abcd"})

        with self.assertRaises(ValueError):
            _ = header.hash
        print("[SUCCESS] Encabezado inválido rechazado.")

    def test_block_from_dict_keeps_txids(self):
        print(">> Ejecutando: test_block_from_dict_keeps_txids...")

        verbose_two = {**GENESIS_JSON, "tx": [{"txid": "aa" * 32, "vin": []}, {"txid": "bb" * 32}]}
        block = Block.from_dict(verbose_two)

        self.assertEqual(block.transactions, ["aa" * 32, "bb" * 32])
        self.assertEqual(block.hash, GENESIS_JSON["hash"])
        self.assertEqual(block.previous_hash, NULL_HASH)
        print("[SUCCESS] Bloque reconstruido desde RPC.")

if __name__ == "__main__":
    unittest.main()
