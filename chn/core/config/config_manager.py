# chn/core/config/config_manager.py
'''
class ConfigManager:
    Centraliza el acceso a la configuración de todos los módulos (RPC, Red, Notificador),
    cargando valores desde el entorno (.env) o desde un JSON.

    Methods:
        __new__(cls): Patrón Singleton, una única instancia por proceso.
        _initialize(self): Crea las configuraciones especializadas con valores por defecto/entorno.
        load_from_json_dict(self, json_data: Dict[str, Any]) -> None: Aplica un JSON completo sobre las sub-configuraciones.
'''

from dotenv import load_dotenv
from typing import Dict, Any

# Cargar variables de entorno si existen
load_dotenv()

from chn.core.config.rpc_config import RpcConfig
from chn.core.config.network_config import NetworkConfig
from chn.core.config.notifier_config import NotifierConfig
from chn.core.config.genesis_config import GenesisConfig

class ConfigManager:

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._rpc = RpcConfig()              # Nodo de confianza (RPC)
        self._network = NetworkConfig()      # Red y par P2P
        self._notifier = NotifierConfig()    # Periodo y tope de reorg

    def load_from_json_dict(self, json_data: Dict[str, Any]) -> None:

        if "rpc" in json_data:
            self._rpc.update_from_dict(json_data["rpc"])

        if "network" in json_data:
            self._network.update_from_dict(json_data["network"])

        if "notifier" in json_data:
            self._notifier.update_from_dict(json_data["notifier"])

    # --- ACCESORES ---

    @property
    def rpc(self) -> RpcConfig:
        return self._rpc

    @property
    def network(self) -> NetworkConfig:
        return self._network

    @property
    def notifier(self) -> NotifierConfig:
        return self._notifier

    @property
    def genesis(self) -> GenesisConfig:
        # Depende de la red elegida, que puede cambiar tras cargar el JSON
        return GenesisConfig(self._network.network)

    # --- DELEGACIÓN (Atajos) ---

    @property
    def poll_period_sec(self) -> float: return self._notifier.poll_period_sec
    @property
    def max_reorg_depth(self) -> int: return self._notifier.max_reorg_depth
    @property
    def genesis_hash(self) -> str: return self.genesis.genesis_hash
