# chn/core/config/genesis_config.py

import os
from typing import Dict, Final

class GenesisConfig:
    """
    Hash del bloque génesis de cada red.
    Se usa para ignorar avisos del génesis (un nodo recién creado lo reporta como mejor bloque).
    """

    KNOWN_GENESIS_HASHES: Final[Dict[str, str]] = {
        "main": "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f",
        "test": "000000000933ea01ad0ee984209779baaec3ced90fa3f408719526f8d77f4943",
        "testnet4": "00000000da84f2bafbbc53dee25a72ae507ff4914b867c565be350b0da8bf043",
        "signet": "00000008819873e925422c1ff0f99f7cc9bbb232af63a077a480a3633bee1ef6",
        "regtest": "0f9188f13cb7b2c71f2a335e3a4fc328bf5beb436012afca590b1a11466e2206",
    }

    def __init__(self, network: str) -> None:
        self._network = network.lower()

        # Redes propias: el hash se inyecta por entorno
        override = os.getenv("CHN_GENESIS_HASH", "").strip().lower()
        if override:
            self._genesis_hash = override
        elif self._network in self.KNOWN_GENESIS_HASHES:
            self._genesis_hash = self.KNOWN_GENESIS_HASHES[self._network]
        else:
            raise ValueError(f"Red desconocida '{network}' y sin CHN_GENESIS_HASH definido")

    @property
    def network(self) -> str:
        return self._network

    @property
    def genesis_hash(self) -> str:
        return self._genesis_hash
