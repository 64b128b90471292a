# chn/interface/api/dependencies.py
import logging
from typing import Optional

from chn.core.nodes.notifier_node import NotifierNode

logger = logging.getLogger(__name__)

class NodeContainer:
    _instance: Optional[NotifierNode] = None

    @classmethod
    def get_instance(cls) -> NotifierNode:
        if cls._instance is None:
            logger.critical("🚨 ERROR DE ARRANQUE: El notificador no ha sido inicializado.")
            raise RuntimeError("El notificador no ha sido inicializado. Ejecute set_instance() primero.")
        return cls._instance

    @classmethod
    def has_instance(cls) -> bool:
        return cls._instance is not None

    @classmethod
    def set_instance(cls, node_instance: NotifierNode):
        if cls._instance is not None:
            logger.debug("Instancia ya inyectada. Ignorando set_instance.")
            return

        cls._instance = node_instance
        logger.info("✅ [API-DI] Notificador inyectado correctamente.")

    @classmethod
    def shutdown(cls):
        if cls._instance:
            logger.info("🛑 [API] Deteniendo notificador...")
            cls._instance.stop()
            cls._instance = None
        else:
            logger.debug("El notificador ya estaba detenido.")

def get_node_dependency() -> NotifierNode:
    return NodeContainer.get_instance()
