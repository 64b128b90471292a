# chn/core/interfaces/i_chain_source.py

from abc import ABC, abstractmethod
from chn.core.models.block import Block

class IChainDataSource(ABC):
    """
    Contrato de la fuente de datos de la cadena (normalmente el RPC de un nodo de confianza).
    Debe tolerar llamadas repetidas y rápidas. Los fallos se reportan con ChainSourceError.
    """

    @abstractmethod
    def get_best_block_hash(self) -> str:
        """Hash de la punta con más trabajo según el nodo."""
        pass

    @abstractmethod
    def get_block_by_hash(self, block_hash: str) -> Block:
        """Bloque completo (encabezado + carga) para el hash dado."""
        pass
