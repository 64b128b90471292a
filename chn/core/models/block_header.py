# chn/core/models/block_header.py

from typing import Dict, Any, Optional
import logging

from chn.core.services.block_hasher import BlockHasher

logger = logging.getLogger(__name__)

# Hash previo del bloque génesis (no tiene padre)
NULL_HASH = "0" * 64

class BlockHeader:
    """
    Encabezado de bloque. Su identidad es exclusivamente su hash,
    derivado de los campos y calculado una sola vez.
    """

    def __init__(
        self,
        version: int,
        previous_hash: str,
        merkle_root: str,
        timestamp: int,
        bits: str,
        nonce: int,
        height: Optional[int] = None
    ) -> None:
        self._version = version
        self._previous_hash = previous_hash.lower()
        self._merkle_root = merkle_root.lower()
        self._timestamp = timestamp
        self._bits = bits.lower()
        self._nonce = nonce
        # Solo informativo (viene del RPC). Nunca se usa para identidad.
        self._height = height
        self._hash: Optional[str] = None

    # --- Getters ---
    @property
    def version(self) -> int: return self._version
    @property
    def previous_hash(self) -> str: return self._previous_hash
    @property
    def merkle_root(self) -> str: return self._merkle_root
    @property
    def timestamp(self) -> int: return self._timestamp
    @property
    def bits(self) -> str: return self._bits
    @property
    def nonce(self) -> int: return self._nonce
    @property
    def height(self) -> Optional[int]: return self._height

    @property
    def hash(self) -> str:
        if self._hash is None:
            self._hash = BlockHasher.calculate(self)
        return self._hash

    def precompute_hash(self) -> str:
        return self.hash

    # --- Identidad ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockHeader):
            return NotImplemented
        return self.hash == other.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    def __repr__(self) -> str:
        return f"BlockHeader({self.hash[:16]}.., prev={self._previous_hash[:16]}..)"

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'BlockHeader':
        """Reconstruye un encabezado desde el JSON de `getblock`/`getblockheader`."""
        return BlockHeader(
            version=int(data['version']),
            # El génesis no trae 'previousblockhash'
            previous_hash=str(data.get('previousblockhash') or NULL_HASH),
            merkle_root=str(data['merkleroot']),
            timestamp=int(data['time']),
            bits=str(data['bits']),
            nonce=int(data['nonce']),
            height=data.get('height')
        )
