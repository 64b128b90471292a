# chn/core/models/chain_window.py

import logging
from typing import List, Optional, Dict, Tuple

from chn.core.models.block_header import BlockHeader
from chn.core.exceptions import ChainInvariantError

logger = logging.getLogger(__name__)

class ChainWindow:
    """
    Fragmento contiguo y reciente de la cadena canónica (el más antiguo primero).

    Solo el rastreador lo muta. Hacia fuera solo salen copias inmutables (snapshot).
    """

    def __init__(self) -> None:
        self._headers: List[BlockHeader] = []

        # Índice por hash para búsquedas O(1)
        self._headers_map: Dict[str, BlockHeader] = {}

    # --- Propiedades ---

    @property
    def tip(self) -> Optional[BlockHeader]:
        return self._headers[-1] if self._headers else None

    def __len__(self) -> int:
        return len(self._headers)

    def is_empty(self) -> bool:
        return not self._headers

    # --- Consultas ---

    def contains(self, block_hash: str) -> bool:
        return block_hash in self._headers_map

    def find(self, block_hash: str) -> Optional[BlockHeader]:
        return self._headers_map.get(block_hash)

    def snapshot(self) -> Tuple[BlockHeader, ...]:
        return tuple(self._headers)

    # --- Mutaciones ---

    def append(self, header: BlockHeader) -> None:
        tip = self.tip
        if tip is not None and header.previous_hash != tip.hash:
            raise ChainInvariantError(
                f"{header.hash[:16]} no extiende la punta {tip.hash[:16]} (prev={header.previous_hash[:16]})"
            )

        self._headers.append(header)
        self._headers_map[header.hash] = header
        self._check_contiguity()

    def truncate_after(self, ancestor: BlockHeader) -> List[BlockHeader]:
        """
        Elimina todo lo posterior a `ancestor` (que se conserva).
        Retorna lo eliminado desde la antigua punta hacia atrás.
        """
        if not self.contains(ancestor.hash):
            raise ChainInvariantError(f"Ancestro {ancestor.hash[:16]} fuera de la ventana")

        index = self._headers.index(ancestor)
        removed = self._headers[index + 1:]
        del self._headers[index + 1:]

        for header in removed:
            del self._headers_map[header.hash]

        self._check_contiguity()
        removed.reverse()
        return removed

    def clear(self) -> List[BlockHeader]:
        """Vacía la ventana. Retorna lo eliminado en el orden en que estaba (antiguo -> nuevo)."""
        removed = self._headers[:]
        self._headers.clear()
        self._headers_map.clear()
        return removed

    # --- Invariante ---

    def _check_contiguity(self) -> None:
        if not __debug__:
            return

        for prev, current in zip(self._headers, self._headers[1:]):
            if current.previous_hash != prev.hash:
                logger.critical(f"💥 Ventana rota entre {prev.hash[:16]} y {current.hash[:16]}")
                raise ChainInvariantError(
                    f"Ventana no contigua: {current.hash[:16]} no apunta a {prev.hash[:16]}"
                )
