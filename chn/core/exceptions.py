# chn/core/exceptions.py

class ChainNotifierError(Exception):
    """Raíz de todos los errores del notificador."""

class ChainSourceError(ChainNotifierError):
    """Fallo transitorio obteniendo datos del nodo (RPC / red). Se reintenta en la siguiente ronda."""

class StepCancelledError(ChainNotifierError):
    """La ronda fue cancelada de forma cooperativa antes de modificar la ventana."""

class ChainInvariantError(ChainNotifierError):
    """La ventana dejó de ser un fragmento contiguo de cadena. Es un bug, nunca un estado válido."""
