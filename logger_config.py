# logger_config.py
import logging
import os
import glob
import sys
from typing import List

from chn.core.config.paths import Paths

def setup_logging(level: int = logging.INFO) -> str:
    # 1. Carpeta de logs (data/logs o CHN_DATA_DIR/logs)
    Paths.ensure_directories_exist()
    log_dir = str(Paths.LOGS_DIR)

    # 2. Rotación por sesión: notifier_0.log, notifier_1.log...
    existentes: List[str] = glob.glob(os.path.join(log_dir, "notifier_*.log"))
    indices: List[int] = []
    for archivo in existentes:
        try:
            num = int(archivo.split('_')[-1].split('.')[0])
            indices.append(num)
        except (ValueError, IndexError): continue

    siguiente: int = max(indices) + 1 if indices else 0
    nombre_archivo: str = os.path.join(log_dir, f"notifier_{siguiente}.log")

    # 3. Root Logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Evita handlers duplicados si se llama dos veces
    root_logger.handlers = []

    # --- CANAL 1: ARCHIVO (historial completo) ---
    fh = logging.FileHandler(nombre_archivo, encoding='utf-8')
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] [%(name)s]: %(message)s'))

    # --- CANAL 2: TERMINAL (solo ERROR y CRITICAL) ---
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.ERROR)
    ch.setFormatter(logging.Formatter('\n❌ %(levelname)s EN: %(name)s | Línea: %(lineno)d\nDetalle: %(message)s\n'))

    root_logger.addHandler(fh)
    root_logger.addHandler(ch)

    print(f"📝 Log de sesión guardado en: {nombre_archivo}")
    return nombre_archivo
