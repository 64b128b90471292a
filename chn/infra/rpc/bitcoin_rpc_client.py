# chn/infra/rpc/bitcoin_rpc_client.py

import itertools
import logging
from typing import Any, Dict, Optional

import requests

from chn.core.interfaces.i_chain_source import IChainDataSource
from chn.core.config.rpc_config import RpcConfig
from chn.core.models.block import Block
from chn.core.exceptions import ChainSourceError

logger = logging.getLogger(__name__)

class BitcoinRpcClient(IChainDataSource):
    """
    Fuente de datos sobre el JSON-RPC de un nodo estilo bitcoind.

    Cualquier fallo (conexión, HTTP, error RPC, respuesta mal formada) se traduce a
    ChainSourceError: la ronda actual se aborta y la siguiente vuelve a intentarlo.
    """

    def __init__(self, config: RpcConfig, session: Optional[requests.Session] = None) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._headers = {"content-type": "application/json"}
        self._ids = itertools.count(1)

        if config.user:
            self._session.auth = (config.user, config.password)

        logger.info(f"✅ Cliente RPC listo para {config.url}")

    @property
    def config(self) -> RpcConfig:
        return self._config

    # --- IChainDataSource ---

    def get_best_block_hash(self) -> str:
        result = self.call("getbestblockhash")
        if not isinstance(result, str):
            raise ChainSourceError(f"getbestblockhash devolvió un tipo inesperado: {type(result).__name__}")
        return result

    def get_block_by_hash(self, block_hash: str) -> Block:
        result = self.call("getblock", block_hash, 1)
        if not isinstance(result, dict):
            raise ChainSourceError(f"getblock devolvió un tipo inesperado: {type(result).__name__}")

        try:
            block = Block.from_dict(result)
            # Un campo no hexadecimal o fuera de rango solo aparece al serializar
            block.header.precompute_hash()
        except (KeyError, ValueError, TypeError) as e:
            raise ChainSourceError(f"Bloque {block_hash[:16]} mal formado: {e}") from e

        # El hash se recalcula localmente; si no coincide con lo pedido, el nodo miente o hay corrupción
        if block.hash != block_hash.lower():
            raise ChainSourceError(
                f"Hash calculado {block.hash[:16]} no coincide con el solicitado {block_hash[:16]}"
            )
        return block

    # --- Transporte ---

    def call(self, method: str, *params: Any) -> Any:
        payload: Dict[str, Any] = {
            "jsonrpc": "1.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params)
        }

        try:
            response = self._session.post(
                self._config.url,
                json=payload,
                headers=self._headers,
                timeout=self._config.timeout_sec
            )
        except requests.exceptions.RequestException as e:
            raise ChainSourceError(f"RPC '{method}' sin conexión: {e}") from e

        # bitcoind responde 500 con el error RPC en el cuerpo
        data = self._decode(response, method)
        if data is None:
            raise ChainSourceError(f"RPC '{method}' falló: HTTP {response.status_code} {response.reason}")

        error = data.get("error")
        if error:
            raise ChainSourceError(f"Error RPC en '{method}': {error}")

        if "result" not in data:
            raise ChainSourceError(f"Respuesta RPC sin 'result' para '{method}'")

        return data["result"]

    def close(self) -> None:
        self._session.close()

    def _decode(self, response: requests.Response, method: str) -> Optional[Dict[str, Any]]:
        try:
            data = response.json()
        except ValueError:
            logger.debug(f"Respuesta no JSON para '{method}' (HTTP {response.status_code})")
            return None

        if not isinstance(data, dict):
            return None
        return data
