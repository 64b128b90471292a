# chn/core/config/network_config.py

import os
from typing import Dict, Any, Optional, Tuple

class NetworkConfig:
    """
    Configuración de red: qué cadena seguimos y a qué par de confianza
    escuchamos para recibir avisos de bloques nuevos.
    """
    def __init__(self) -> None:
        self._network: str = os.getenv("CHN_NETWORK", "main").lower()
        self._p2p_enabled: bool = os.getenv("CHN_P2P_ENABLED", "True").lower() == "true"

        # Formato "host:puerto"
        self._trusted_node: str = os.getenv("CHN_TRUSTED_NODE", "127.0.0.1:5000").strip()

        self._reconnect_delay_sec: float = float(os.getenv("CHN_P2P_RECONNECT_SEC", 10))
        self._max_buffer_size: int = int(os.getenv("CHN_NET_MAX_BUFFER", 5 * 1024 * 1024))

    # --- Getters Públicos (Solo Lectura) ---
    @property
    def network(self) -> str: return self._network
    @property
    def p2p_enabled(self) -> bool: return self._p2p_enabled
    @property
    def trusted_node(self) -> str: return self._trusted_node
    @property
    def reconnect_delay_sec(self) -> float: return self._reconnect_delay_sec
    @property
    def max_buffer_size(self) -> int: return self._max_buffer_size

    @property
    def trusted_endpoint(self) -> Optional[Tuple[str, int]]:
        """(host, puerto) del par de confianza, o None si está mal formado."""
        if ":" not in self._trusted_node:
            return None
        host, port_str = self._trusted_node.rsplit(":", 1)
        try:
            return host, int(port_str)
        except ValueError:
            return None

    # --- Método de Actualización Controlada ---
    def update_from_dict(self, data: Dict[str, Any]) -> None:
        if not data: return

        if "network" in data:
            self._network = str(data["network"]).lower()

        if "p2p_enabled" in data:
            self._p2p_enabled = bool(data["p2p_enabled"])

        if "trusted_node" in data:
            self._trusted_node = str(data["trusted_node"]).strip()

        if "reconnect_delay_sec" in data:
            self._reconnect_delay_sec = float(data["reconnect_delay_sec"])

        if "max_buffer_size" in data:
            self._max_buffer_size = int(data["max_buffer_size"])
