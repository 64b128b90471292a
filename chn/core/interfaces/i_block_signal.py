# chn/core/interfaces/i_block_signal.py

from abc import ABC, abstractmethod
from typing import Callable, Optional

# Callback (hash anunciado o None) -> None
BlockSignalHandler = Callable[[Optional[str]], None]

class IBlockSignalSource(ABC):
    """
    Fuente best-effort de avisos "se anunció un bloque nuevo".
    El aviso no necesita carga útil: quien lo recibe vuelve a consultar el RPC.
    Se toleran avisos duplicados o tardíos.
    """

    @abstractmethod
    def register_handler(self, handler: BlockSignalHandler) -> None:
        pass

    @abstractmethod
    def unregister_handler(self, handler: BlockSignalHandler) -> None:
        pass
