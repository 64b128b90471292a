# chn/interface/api/config.py

import os
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ApiConfig:
    host: str
    port: int
    title: str
    version: str
    debug_mode: bool

    @classmethod
    def load(cls) -> 'ApiConfig':
        config = cls(
            host=os.getenv("CHN_API_HOST", "127.0.0.1"),
            port=int(os.getenv("CHN_API_PORT", 8080)),
            title=os.getenv("CHN_API_TITLE", "Chain Head Notifier API"),
            version="0.1.0",
            debug_mode=os.getenv("CHN_DEBUG", "False").lower() == "true"
        )

        logger.info("⚙️  Configuración de la API cargada:")
        logger.info(f"   URL: http://{config.host}:{config.port}")
        logger.debug(f"   Debug: {config.debug_mode}")

        return config

# Instancia Singleton inmutable
settings = ApiConfig.load()
