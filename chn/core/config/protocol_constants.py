# chn/core/config/protocol_constants.py

from typing import Final

class ProtocolConstants:
    """
    Vocabulario del protocolo P2P (JSON delimitado por líneas) que habla el par de confianza.
    """

    PROTOCOL_VERSION: Final[int] = 1
    USER_AGENT: Final[str]       = "ChainHeadNotifier/1.0"

    # --- Tipos de Mensajes ---
    MSG_HANDSHAKE: Final[str] = "HANDSHAKE"
    MSG_INV: Final[str]       = "INV"
    MSG_BLOCK: Final[str]     = "BLOCK"
    MSG_HEADERS: Final[str]   = "HEADERS"

    # --- Tipos de elementos dentro de un INV ---
    INV_TYPE_BLOCK: Final[str] = "BLOCK"
    INV_TYPE_TX: Final[str]    = "TX"
