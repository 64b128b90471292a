# chn/tests/mocks/mock_chain_source.py
'''
class MockChainSource:
    Nodo RPC en memoria. Permite construir ramas arbitrarias y decidir qué hash reporta
    como mejor bloque, registrando cada consulta para verificar el orden de descargas.

    Methods::
        make_block(parent, tag) -> Block:
            Crea (y registra) un bloque hijo de `parent` (o un génesis si parent es None).
        make_chain(parent, length, tag) -> List[Block]:
            Crea una rama lineal de `length` bloques sobre `parent`.
        set_best(block) -> None:
            Fija el mejor bloque que devolverá getbestblockhash.
'''

from typing import Dict, List, Optional

from chn.core.interfaces.i_chain_source import IChainDataSource
from chn.core.models.block import Block
from chn.core.models.block_header import BlockHeader, NULL_HASH
from chn.core.exceptions import ChainSourceError

MOCK_MERKLE_ROOT: str = "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
MOCK_BITS: str = "207fffff"

class MockChainSource(IChainDataSource):

    def __init__(self) -> None:
        self._blocks: Dict[str, Block] = {}
        self._best_hash: str = NULL_HASH
        self._nonce = 0

        # Registro de llamadas y fallos programados
        self.block_requests: List[str] = []
        self.best_hash_requests = 0
        self.fail_best_hash = False
        self.fail_on_hashes: List[str] = []

    # --- Construcción de cadenas ---

    def make_block(self, parent: Optional[Block] = None, tag: str = "") -> Block:
        self._nonce += 1
        height = parent.header.height + 1 if parent is not None and parent.header.height is not None else 0
        header = BlockHeader(
            version=0x20000000,
            previous_hash=parent.hash if parent is not None else NULL_HASH,
            merkle_root=MOCK_MERKLE_ROOT,
            timestamp=1_700_000_000 + self._nonce,
            bits=MOCK_BITS,
            nonce=self._nonce,
            height=height
        )
        block = Block(header, [f"tx-{tag or self._nonce}"])
        self._blocks[block.hash] = block
        return block

    def make_chain(self, parent: Optional[Block], length: int, tag: str = "") -> List[Block]:
        chain: List[Block] = []
        current = parent
        for i in range(length):
            current = self.make_block(current, tag=f"{tag}{i}")
            chain.append(current)
        return chain

    def set_best(self, block: Block) -> None:
        self._best_hash = block.hash

    def reset_log(self) -> None:
        self.block_requests = []
        self.best_hash_requests = 0

    # --- IChainDataSource ---

    def get_best_block_hash(self) -> str:
        self.best_hash_requests += 1
        if self.fail_best_hash:
            raise ChainSourceError("RPC simulado caído (getbestblockhash)")
        return self._best_hash

    def get_block_by_hash(self, block_hash: str) -> Block:
        self.block_requests.append(block_hash)
        if block_hash in self.fail_on_hashes:
            raise ChainSourceError(f"RPC simulado caído (getblock {block_hash[:8]})")
        if block_hash not in self._blocks:
            raise ChainSourceError(f"Bloque {block_hash[:8]} desconocido")
        return self._blocks[block_hash]
