# chn/core/managers/polling_driver.py

import logging
import threading
from typing import Optional

from chn.core.managers.chain_window_tracker import ChainWindowTracker
from chn.core.interfaces.i_block_signal import IBlockSignalSource
from chn.core.exceptions import ChainSourceError, StepCancelledError

logger = logging.getLogger(__name__)

class PollingDriver:
    """
    Ejecuta `tracker.step()` cada `period_sec` segundos y, además, en cuanto llega
    un aviso de bloque nuevo.

    Un único hilo trabajador: nunca hay dos rondas a la vez. Los avisos que llegan
    durante una ronda se acumulan en una sola bandera, así que provocan como máximo
    una ronda extra inmediata.
    """

    def __init__(
        self,
        tracker: ChainWindowTracker,
        period_sec: float,
        signal_source: Optional[IBlockSignalSource] = None
    ) -> None:
        self._tracker = tracker
        self._period_sec = period_sec
        self._signal_source = signal_source

        self._trigger = threading.Event()
        self._stop_requested = threading.Event()
        self._cancel = threading.Event()
        self._round_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

        # Estado observable
        self._status: Optional[str] = None
        self._round_count = 0
        self._consecutive_failures = 0
        self._last_error: Optional[str] = None

    # --- Propiedades ---

    @property
    def status(self) -> Optional[str]:
        """Último mejor hash devuelto por una ronda exitosa."""
        return self._status

    @property
    def round_count(self) -> int: return self._round_count
    @property
    def consecutive_failures(self) -> int: return self._consecutive_failures
    @property
    def last_error(self) -> Optional[str]: return self._last_error
    @property
    def period_sec(self) -> float: return self._period_sec

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # --- Ciclo de Vida ---

    def start(self) -> None:
        if self.is_running:
            logger.warning("El driver de sondeo ya está corriendo.")
            return

        self._stop_requested.clear()
        self._cancel.clear()

        if self._signal_source:
            self._signal_source.register_handler(self._on_block_signal)

        self._thread = threading.Thread(target=self._run_loop, daemon=True, name="PollingDriver")
        self._thread.start()
        logger.info(f"⏱️  Driver de sondeo iniciado (periodo: {self._period_sec}s).")

    def stop(self, cancel_in_flight: bool = False, timeout: Optional[float] = None) -> None:
        """
        Se desuscribe de la fuente de avisos, deja terminar la ronda en curso y detiene el hilo.
        Con `cancel_in_flight` la ronda en curso se aborta en la siguiente consulta de red.
        """
        if self._signal_source:
            self._signal_source.unregister_handler(self._on_block_signal)

        self._stop_requested.set()
        if cancel_in_flight:
            self._cancel.set()

        # Despertar al hilo si está esperando el siguiente periodo
        self._trigger.set()

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("El hilo de sondeo no terminó dentro del tiempo de espera.")
                return

        self._thread = None
        logger.info("🛑 Driver de sondeo detenido.")

    def trigger_round(self) -> None:
        """Pide una ronda inmediata. Varias peticiones seguidas cuentan como una."""
        self._trigger.set()

    # --- Ronda ---

    def run_round(self) -> bool:
        """Ejecuta una ronda protegida. Ningún error escapa de aquí."""
        with self._round_lock:
            try:
                best_hash = self._tracker.step(self._cancel)

            except StepCancelledError:
                logger.info("Ronda cancelada antes de modificar la ventana.")
                return False

            except ChainSourceError as e:
                self._record_failure(str(e))
                return False

            except Exception as e:
                self._record_failure(f"{type(e).__name__}: {e}", unexpected=True)
                return False

            if self._consecutive_failures:
                logger.info(f"✅ Fuente de cadena recuperada tras {self._consecutive_failures} fallos.")

            self._consecutive_failures = 0
            self._last_error = None
            self._status = best_hash
            self._round_count += 1
            return True

    # --- Internos ---

    def _run_loop(self) -> None:
        while not self._stop_requested.is_set():
            self._trigger.clear()
            if self._stop_requested.is_set():
                break

            self.run_round()

            if self._stop_requested.is_set():
                break
            self._trigger.wait(self._period_sec)

    def _on_block_signal(self, block_hash: Optional[str]) -> None:
        label = block_hash[:16] if block_hash else "?"
        logger.debug(f"📣 Aviso de bloque nuevo ({label}). Adelantando ronda.")
        self.trigger_round()

    def _record_failure(self, message: str, unexpected: bool = False) -> None:
        self._consecutive_failures += 1

        # Un mismo error repetido solo se reporta completo la primera vez
        if message == self._last_error:
            logger.debug(f"Mismo error por {self._consecutive_failures}ª vez: {message}")
        elif unexpected:
            logger.exception(f"Error inesperado en la ronda de seguimiento: {message}")
        else:
            logger.error(f"⚠️ Ronda fallida, se reintentará: {message}")

        self._last_error = message
