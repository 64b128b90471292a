# chn/core/services/block_hasher.py

import struct
import hashlib
import logging

from chn.core.interfaces.hasher_protocols import BlockHeaderProtocol

logger = logging.getLogger(__name__)

class BlockHasher:
    """
    Serializa el encabezado en su forma canónica de 80 bytes y calcula su hash.
    Los hashes se manejan en hexadecimal "de pantalla" (bytes invertidos), igual que el RPC.
    """

    HEADER_SIZE = 80

    @staticmethod
    def serialize(header: BlockHeaderProtocol) -> bytes:
        try:
            payload = bytearray()

            # 1. Versión (4 bytes signed int)
            payload.extend(struct.pack('<i', header.version))

            # 2. Hash previo (32 bytes, orden interno)
            payload.extend(BlockHasher._hash_to_internal(header.previous_hash))

            # 3. Merkle Root (32 bytes, orden interno)
            payload.extend(BlockHasher._hash_to_internal(header.merkle_root))

            # 4. Timestamp (4 bytes unsigned int)
            payload.extend(struct.pack('<I', header.timestamp))

            # 5. Bits (compacto, 4 bytes)
            payload.extend(struct.pack('<I', int(header.bits, 16)))

            # 6. Nonce (4 bytes unsigned int)
            payload.extend(struct.pack('<I', header.nonce))

            return bytes(payload)

        except (ValueError, TypeError, struct.error) as e:
            logger.error(f"Encabezado no serializable: {e}")
            raise ValueError(f"Encabezado inválido: {e}") from e

    @staticmethod
    def calculate(header: BlockHeaderProtocol) -> str:
        payload = BlockHasher.serialize(header)

        # --- DOBLE SHA-256 ---
        h1 = hashlib.sha256(payload).digest()
        h2 = hashlib.sha256(h1).digest()
        return h2[::-1].hex()

    @staticmethod
    def _hash_to_internal(display_hex: str) -> bytes:
        raw = bytes.fromhex(display_hex)
        if len(raw) != 32:
            raise ValueError(f"Hash de longitud {len(raw)} (se esperaban 32 bytes)")
        return raw[::-1]
