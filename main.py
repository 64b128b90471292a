import os
import sys
import json
import argparse
import logging
import time
from typing import Any, Dict

import uvicorn

# ConfigManager carga el .env antes de que Paths lea CHN_DATA_DIR
from chn.core.config.config_manager import ConfigManager
import logger_config
from chn.core.factories.node_factory import NodeFactory
from chn.core.models.block import Block
from chn.core.models.block_header import BlockHeader

logger = logging.getLogger()

# =========================================================
# 🛠️ FUNCIONES DE UTILIDAD
# =========================================================

def load_config(config_path: str) -> Dict[str, Any]:
    """Carga el archivo JSON de configuración."""
    if not os.path.exists(config_path):
        logger.critical(f"❌ No existe el archivo de configuración: {config_path}")
        sys.exit(1)

    try:
        with open(config_path, 'r') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.critical(f"❌ JSON Corrupto en {config_path}: {e}")
        sys.exit(1)

def print_block_added(block: Block) -> None:
    height = block.header.height if block.header.height is not None else "?"
    print(f"➕ #{height} {block.hash}")

def print_reorg(header: BlockHeader) -> None:
    print(f"➖ REORG {header.hash}")

def run_headless_notifier(echo_events: bool):
    """Arranca el notificador sin API. Ctrl+C para detener."""
    node = None
    try:
        print("\n" + "="*60)
        print("🛰️  INICIANDO NOTIFICADOR DE CADENA (Headless)")
        print("="*60 + "\n")

        node = NodeFactory.create_notifier_node()
        if echo_events:
            node.tracker.register_block_handler(print_block_added)
            node.tracker.register_reorg_handler(print_reorg)

        node.start()
        logger.info("✅ Notificador corriendo.")
        print("✅ Notificador activo. Presiona Ctrl+C para detener.")

        while True:
            time.sleep(1)

    except KeyboardInterrupt:
        logger.info("🛑 Deteniendo notificador por solicitud del usuario...")
        if node:
            node.stop()
        print("\n👋 Notificador detenido correctamente.")
        sys.exit(0)
    except Exception as e:
        logger.critical(f"❌ Error fatal en el notificador: {e}", exc_info=True)
        sys.exit(1)

# =========================================================
# 🚀 ENTRY POINT PRINCIPAL
# =========================================================

def main():
    parser = argparse.ArgumentParser(description="Notificador de la punta de la cadena")

    parser.add_argument("--config", help="Archivo JSON con secciones rpc / network / notifier")
    parser.add_argument("--network", help="Forzar red (main, test, testnet4, signet, regtest)")
    parser.add_argument("--api", type=int, help="Levantar la API de estado en este puerto")
    parser.add_argument("--quiet", action="store_true", help="No imprimir eventos en consola")

    args = parser.parse_args()

    logger_config.setup_logging()

    config = ConfigManager()
    if args.config:
        config.load_from_json_dict(load_config(args.config))
    if args.network:
        config.network.update_from_dict({"network": args.network})

    if args.api:
        print("\n" + "="*60)
        print(f"🌐 API de estado en: http://0.0.0.0:{args.api}")
        print("="*60 + "\n")
        uvicorn.run("chn.interface.api.server:app", host="0.0.0.0", port=args.api, log_level="info")
    else:
        run_headless_notifier(echo_events=not args.quiet)

if __name__ == "__main__":
    main()
