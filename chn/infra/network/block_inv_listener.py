# chn/infra/network/block_inv_listener.py

import json
import logging
import socket
import threading
import time
from typing import Any, Dict, List, Optional

from chn.core.interfaces.i_block_signal import IBlockSignalSource, BlockSignalHandler
from chn.core.config.network_config import NetworkConfig
from chn.core.config.protocol_constants import ProtocolConstants

logger = logging.getLogger(__name__)

class BlockInvListener(IBlockSignalSource):
    """
    Escucha a UN par de confianza y avisa cuando anuncia un bloque nuevo.

    Transporte: TCP con JSON delimitado por líneas. Solo lectura: aparte del
    HANDSHAKE inicial no enviamos nada. Si la conexión cae, se reintenta cada
    `reconnect_delay_sec` segundos hasta que se llame a stop().
    """

    def __init__(self, config: NetworkConfig, agent_name: str = ProtocolConstants.USER_AGENT) -> None:
        self._config = config
        self._agent_name = agent_name

        self._handlers: List[BlockSignalHandler] = []
        self._handlers_lock = threading.RLock()

        self._sock: Optional[socket.socket] = None
        self._sock_lock = threading.Lock()
        self._running = False
        self._wakeup = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._delimiter = b'\n'

        self._connected = False
        self._announcements = 0

    # --- Propiedades ---

    @property
    def config(self) -> NetworkConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def announcements(self) -> int:
        return self._announcements

    # --- IBlockSignalSource ---

    def register_handler(self, handler: BlockSignalHandler) -> None:
        with self._handlers_lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def unregister_handler(self, handler: BlockSignalHandler) -> None:
        with self._handlers_lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    # --- Ciclo de Vida ---

    def start(self) -> None:
        if self._running:
            logger.warning("El listener P2P ya está corriendo.")
            return

        if self._config.trusted_endpoint is None:
            logger.error(f"❌ Par de confianza mal formado: '{self._config.trusted_node}'. P2P desactivado.")
            return

        self._running = True
        self._wakeup.clear()
        self._thread = threading.Thread(target=self._connection_loop, daemon=True, name="BlockInvListener")
        self._thread.start()
        logger.info(f"🚀 Escuchando anuncios de bloques de {self._config.trusted_node}")

    def stop(self, timeout: float = 5.0) -> None:
        self._running = False
        self._wakeup.set()

        # Cerrar el socket desbloquea recv()
        self._close_socket()

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None
        logger.info("🛑 Listener P2P detenido.")

    def announce(self, block_hash: Optional[str] = None) -> None:
        """Inyecta un aviso desde el propio proceso (tests, API, otros componentes)."""
        self._fire(block_hash)

    # --- Conexión ---

    def _connection_loop(self) -> None:
        endpoint = self._config.trusted_endpoint
        if endpoint is None:
            return
        host, port = endpoint

        while self._running:
            try:
                sock = socket.create_connection((host, port), timeout=5.0)
                sock.settimeout(None)
                self._configure_socket(sock)

                with self._sock_lock:
                    self._sock = sock

                self._connected = True
                logger.info(f"🔗 Conectado al par de confianza {host}:{port}")
                self._send_handshake(sock)
                self._listen(sock)

            except OSError as e:
                if self._running:
                    logger.debug(f"NET: No se pudo hablar con {host}:{port} ({e})")
            finally:
                self._connected = False
                self._close_socket()

            if self._running:
                self._wakeup.wait(self._config.reconnect_delay_sec)

    def _listen(self, sock: socket.socket) -> None:
        """Lee tramas completas (delimitadas por línea) hasta que la conexión se cierre."""
        buffer = b""
        chunk_size = 4096

        while self._running:
            data = sock.recv(chunk_size)
            if not data:
                logger.info("NET: El par de confianza cerró la conexión.")
                return

            buffer += data

            # 🛡️ Protección ante un par que no envía delimitadores
            if len(buffer) > self._config.max_buffer_size:
                logger.warning(f"🛡️ Buffer excedido ({len(buffer)} bytes). Reiniciando conexión.")
                return

            while self._delimiter in buffer:
                message_chunk, buffer = buffer.split(self._delimiter, 1)
                if not message_chunk:
                    continue

                try:
                    decoded_msg = message_chunk.decode('utf-8')
                except UnicodeDecodeError:
                    logger.error("🗑️ Trama corrupta (No UTF-8) del par de confianza")
                    continue

                self._on_message_received(decoded_msg)

    # --- Protocolo ---

    def _on_message_received(self, message_str: str) -> None:
        try:
            data = json.loads(message_str)
        except json.JSONDecodeError:
            logger.warning("🗑️ JSON corrupto recibido del par de confianza")
            return

        if not isinstance(data, dict):
            return

        msg_type = data.get("type")
        payload = data.get("payload")

        if msg_type == ProtocolConstants.MSG_INV:
            for block_hash in self._block_hashes_from_inv(payload):
                self._fire(block_hash)

        elif msg_type == ProtocolConstants.MSG_BLOCK:
            block_hash = None
            if isinstance(payload, dict):
                header = payload.get("header")
                block_hash = payload.get("hash") or (header.get("hash") if isinstance(header, dict) else None)
            self._fire(block_hash)

        elif msg_type == ProtocolConstants.MSG_HEADERS:
            # Solo interesa que hay algo nuevo; avisamos con el último
            if isinstance(payload, list) and payload:
                last = payload[-1]
                self._fire(last.get("hash") if isinstance(last, dict) else None)

        elif msg_type == ProtocolConstants.MSG_HANDSHAKE and isinstance(payload, dict):
            remote_agent = payload.get("agent", payload.get("node_id", "Unknown"))
            logger.info(f"🤝 Handshake del par de confianza [{remote_agent}]")

    def _block_hashes_from_inv(self, payload: Any) -> List[Optional[str]]:
        items = payload.get("items", []) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            return []

        hashes: List[Optional[str]] = []
        for item in items:
            if isinstance(item, dict) and item.get("type") == ProtocolConstants.INV_TYPE_BLOCK:
                hashes.append(item.get("hash"))
        return hashes

    def _fire(self, block_hash: Optional[str]) -> None:
        self._announcements += 1

        with self._handlers_lock:
            handlers = list(self._handlers)

        for handler in handlers:
            try:
                handler(block_hash)
            except Exception:
                logger.exception("Error en manejador de aviso de bloque")

    def _send_handshake(self, sock: socket.socket) -> None:
        msg: Dict[str, Any] = {
            "type": ProtocolConstants.MSG_HANDSHAKE,
            "payload": {
                "version": ProtocolConstants.PROTOCOL_VERSION,
                "agent": self._agent_name,
                "timestamp": int(time.time())
            }
        }
        sock.sendall(json.dumps(msg).encode('utf-8') + self._delimiter)

    # --- Internos ---

    def _configure_socket(self, sock: socket.socket) -> None:
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
        except OSError:
            logger.warning("No se pudieron establecer opciones avanzadas de socket.")

    def _close_socket(self) -> None:
        with self._sock_lock:
            sock = self._sock
            self._sock = None

        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # Ya cerrado por el otro extremo
        sock.close()
