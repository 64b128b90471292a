# chn/core/config/rpc_config.py

import os
from typing import Dict, Any

class RpcConfig:
    """
    Configuración del cliente JSON-RPC del nodo de confianza.
    """
    def __init__(self) -> None:
        self._url: str = os.getenv("CHN_RPC_URL", "http://127.0.0.1:8332")
        self._user: str = os.getenv("CHN_RPC_USER", "")
        self._password: str = os.getenv("CHN_RPC_PASSWORD", "")
        self._timeout_sec: float = float(os.getenv("CHN_RPC_TIMEOUT", 30))

    # --- Getters Públicos (Solo Lectura) ---
    @property
    def url(self) -> str: return self._url
    @property
    def user(self) -> str: return self._user
    @property
    def password(self) -> str: return self._password
    @property
    def timeout_sec(self) -> float: return self._timeout_sec

    def update_from_dict(self, data: Dict[str, Any]) -> None:
        if not data: return

        if "url" in data:
            self._url = str(data["url"])
        if "user" in data:
            self._user = str(data["user"])
        if "password" in data:
            self._password = str(data["password"])
        if "timeout_sec" in data:
            self._timeout_sec = float(data["timeout_sec"])
