# chn/core/interfaces/hasher_protocols.py

from typing import Protocol

class BlockHeaderProtocol(Protocol):
    """
    Define el 'molde' binario de un encabezado (80 bytes).
    Permite que el BlockHasher trabaje sin depender de la clase BlockHeader completa.
    """
    @property
    def version(self) -> int: ...
    @property
    def previous_hash(self) -> str: ...
    @property
    def merkle_root(self) -> str: ...
    @property
    def timestamp(self) -> int: ...
    @property
    def bits(self) -> str: ...
    @property
    def nonce(self) -> int: ...
