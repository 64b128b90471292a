# chn/core/config/paths.py

import os
from pathlib import Path

class Paths:
    """
    Centraliza las rutas absolutas del proyecto.
    La raíz de datos puede redirigirse con CHN_DATA_DIR.
    """

    _CODE_ROOT = Path(__file__).resolve().parent.parent.parent.parent

    DATA_DIR = Path(os.getenv("CHN_DATA_DIR") or _CODE_ROOT / "data")
    LOGS_DIR = DATA_DIR / "logs"

    @staticmethod
    def ensure_directories_exist():
        """Crea la estructura de carpetas si no existe."""
        os.makedirs(Paths.LOGS_DIR, exist_ok=True)

        return {
            "root": str(Paths.DATA_DIR),
            "logs": str(Paths.LOGS_DIR)
        }
