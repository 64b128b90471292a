# chn/core/managers/chain_window_tracker.py

import logging
import threading
from typing import Callable, List, Optional, Tuple

from chn.core.interfaces.i_chain_source import IChainDataSource
from chn.core.models.block import Block
from chn.core.models.block_header import BlockHeader, NULL_HASH
from chn.core.models.chain_window import ChainWindow
from chn.core.exceptions import StepCancelledError

logger = logging.getLogger(__name__)

BlockAddedHandler = Callable[[Block], None]
ReorgHandler = Callable[[BlockHeader], None]

class ChainWindowTracker:
    """
    Convierte cada "cambió el mejor bloque" en eventos ordenados de
    bloque añadido / bloque revertido, manteniendo una ventana contigua de encabezados.

    Aplicando los eventos en orden, el consumidor reconstruye la misma vista de la cadena.
    No es reentrante: quien lo ejecuta (PollingDriver) garantiza una sola ronda a la vez.
    """

    DEFAULT_MAX_REORG_DEPTH = 100

    def __init__(
        self,
        chain_source: IChainDataSource,
        genesis_hash: str,
        max_reorg_depth: int = DEFAULT_MAX_REORG_DEPTH
    ) -> None:
        self._source = chain_source
        self._genesis_hash = genesis_hash.lower()
        self._max_reorg_depth = max_reorg_depth

        self._window = ChainWindow()
        self._last_best_hash: Optional[str] = None

        self._block_handlers: List[BlockAddedHandler] = []
        self._reorg_handlers: List[ReorgHandler] = []

        logger.info(f"Rastreador de cadena activo (profundidad máxima de reorg: {max_reorg_depth}).")

    # --- Suscripciones ---

    def register_block_handler(self, handler: BlockAddedHandler) -> None:
        self._block_handlers.append(handler)

    def unregister_block_handler(self, handler: BlockAddedHandler) -> None:
        if handler in self._block_handlers:
            self._block_handlers.remove(handler)

    def register_reorg_handler(self, handler: ReorgHandler) -> None:
        self._reorg_handlers.append(handler)

    def unregister_reorg_handler(self, handler: ReorgHandler) -> None:
        if handler in self._reorg_handlers:
            self._reorg_handlers.remove(handler)

    # --- Consultas (solo lectura) ---

    @property
    def last_best_hash(self) -> Optional[str]:
        return self._last_best_hash

    @property
    def max_reorg_depth(self) -> int:
        return self._max_reorg_depth

    @property
    def tip(self) -> Optional[BlockHeader]:
        return self._window.tip

    def window_snapshot(self) -> Tuple[BlockHeader, ...]:
        return self._window.snapshot()

    # --- Ronda principal ---

    def step(self, cancel: Optional[threading.Event] = None) -> str:
        """
        Ejecuta una ronda de seguimiento y retorna el mejor hash observado.

        Todas las consultas de red ocurren antes de tocar la ventana: si el RPC falla
        (ChainSourceError) o se cancela la ronda (StepCancelledError), la ventana queda
        intacta y no se emite ningún evento.
        """
        self._check_cancelled(cancel)
        best_hash = self._source.get_best_block_hash().lower()

        # Sin bloque nuevo, o el nodo reporta el génesis (nunca se notifica)
        if best_hash == self._last_best_hash or best_hash == self._genesis_hash:
            self._last_best_hash = best_hash
            return best_hash

        self._check_cancelled(cancel)
        arrived_block = self._source.get_block_by_hash(best_hash)
        arrived_header = arrived_block.header
        arrived_header.precompute_hash()

        self._process_arrival(arrived_block, cancel)

        self._last_best_hash = best_hash
        return best_hash

    # --- Clasificación ---

    def _process_arrival(self, arrived_block: Block, cancel: Optional[threading.Event]) -> None:
        arrived_header = arrived_block.header

        # 1. Primer bloque: se acepta sin comprobaciones
        if self._window.is_empty():
            logger.info(f"📌 Ventana inicializada en {arrived_header.hash[:16]}")
            self._add_block(arrived_block)
            return

        # 2. Ya procesado (aviso duplicado o tardío)
        if self._window.contains(arrived_header.hash):
            logger.debug(f"Bloque {arrived_header.hash[:16]} ya procesado. Ignorado.")
            return

        # 3. Extensión simple (el caso común)
        tip = self._window.tip
        if tip is not None and tip.hash == arrived_header.previous_hash:
            self._add_block(arrived_block)
            return

        # 4. Reorg corta: el padre está dentro de la ventana
        ancestor = self._window.find(arrived_header.previous_hash)
        if ancestor is not None:
            logger.warning(f"🔀 Reorg detectada. Ancestro común: {ancestor.hash[:16]}")
            self._reorg_to(ancestor)
            self._add_block(arrived_block)
            return

        # 5. Reorg profunda o bloques perdidos: retroceder por RPC
        self._backfill(arrived_block, cancel)

    def _backfill(self, arrived_block: Block, cancel: Optional[threading.Event]) -> None:
        missed_blocks: List[Block] = [arrived_block]
        current_header = arrived_block.header

        while True:
            self._check_cancelled(cancel)

            # Llegamos al génesis sin encontrar ancestro: la ventana pertenece a otra cadena
            if current_header.previous_hash == NULL_HASH:
                self._flush_window()
                logger.critical("🚨 Retroceso hasta el génesis sin ancestro común. Ventana vaciada.")
                return

            missed_block = self._source.get_block_by_hash(current_header.previous_hash)

            current_header = missed_block.header
            current_header.precompute_hash()
            missed_blocks.append(missed_block)

            if len(missed_blocks) > self._max_reorg_depth:
                self._flush_window()
                logger.critical(
                    f"🚨 Reorg de más de {self._max_reorg_depth} bloques detectada. "
                    f"Ventana vaciada; requiere resincronización manual."
                )
                return

            ancestor = self._window.find(current_header.previous_hash)
            if ancestor is not None:
                # Si el ancestro no es la punta, además de bloques perdidos hubo una reorg
                tip = self._window.tip
                if tip is not None and ancestor.hash != tip.hash:
                    logger.warning(f"🔀 Reorg detectada durante el relleno. Ancestro común: {ancestor.hash[:16]}")
                    self._reorg_to(ancestor)
                break

        missed_blocks.reverse()
        logger.info(f"Recuperados {len(missed_blocks)} bloques perdidos.")
        for block in missed_blocks:
            self._add_block(block)

    # --- Mutaciones + emisión ---

    def _add_block(self, block: Block) -> None:
        self._window.append(block.header)
        logger.info(f"➕ Bloque {block.hash[:16]} añadido (ventana: {len(self._window)}).")

        for handler in list(self._block_handlers):
            try:
                handler(block)
            except Exception:
                logger.exception(f"Error en suscriptor de bloque para {block.hash[:16]}")

    def _reorg_to(self, ancestor: BlockHeader) -> None:
        removed = self._window.truncate_after(ancestor)
        self._emit_reorg(removed)

    def _flush_window(self) -> None:
        removed = self._window.clear()
        self._emit_reorg(removed)

    def _emit_reorg(self, removed: List[BlockHeader]) -> None:
        for header in removed:
            logger.info(f"➖ Bloque {header.hash[:16]} revertido.")
            for handler in list(self._reorg_handlers):
                try:
                    handler(header)
                except Exception:
                    logger.exception(f"Error en suscriptor de reorg para {header.hash[:16]}")

    @staticmethod
    def _check_cancelled(cancel: Optional[threading.Event]) -> None:
        if cancel is not None and cancel.is_set():
            raise StepCancelledError("Ronda cancelada")
