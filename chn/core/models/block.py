# chn/core/models/block.py

import logging
from typing import List, Dict, Any

from chn.core.models.block_header import BlockHeader

logger = logging.getLogger(__name__)

class Block:
    """
    Encabezado + carga útil. La carga (ids de transacciones) es opaca para el rastreador.
    """

    def __init__(self, header: BlockHeader, transactions: List[str]) -> None:
        self._header = header
        self._transactions: List[str] = transactions if transactions else []

    @property
    def header(self) -> BlockHeader: return self._header

    @property
    def hash(self) -> str: return self._header.hash

    @property
    def previous_hash(self) -> str: return self._header.previous_hash

    @property
    def transactions(self) -> List[str]: return self._transactions[:]

    def __repr__(self) -> str:
        return f"Block({self.hash[:16]}.., txs={len(self._transactions)})"

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Block':
        """Reconstruye un bloque desde el JSON de `getblock <hash> 1`."""
        header = BlockHeader.from_dict(data)

        tx_list: List[str] = []
        for tx in data.get('tx', []):
            # Con verbosidad 2 cada TX es un objeto; nos quedamos con el txid
            if isinstance(tx, dict):
                tx_list.append(str(tx.get('txid', '')))
            else:
                tx_list.append(str(tx))

        return Block(header=header, transactions=tx_list)
