# chn/interface/api/server.py

import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Depends, Query, status

from chn.interface.api import schemas
from chn.interface.api.dependencies import NodeContainer, get_node_dependency
from chn.interface.api.config import settings
from chn.core.nodes.notifier_node import NotifierNode
from chn.core.factories.node_factory import NodeFactory

logger = logging.getLogger(__name__)

# ==============================================================================
# 🏗️ SERVICE LAYER
# ==============================================================================

class NotifierService:
    def __init__(self, node: NotifierNode):
        self.node = node

    def get_status(self) -> schemas.NodeStatusResponse:
        return schemas.NodeStatusResponse(**self.node.get_status())

    def get_window(self) -> schemas.WindowResponse:
        headers = [
            schemas.HeaderResponse(
                hash=h.hash,
                previous_hash=h.previous_hash,
                height=h.height,
                timestamp=h.timestamp
            )
            for h in self.node.tracker.window_snapshot()
        ]
        return schemas.WindowResponse(size=len(headers), headers=headers)

    def get_events(self, limit: int) -> List[schemas.EventResponse]:
        return [schemas.EventResponse(**e) for e in self.node.journal.recent(limit)]

    def trigger(self) -> schemas.TriggerResponse:
        self.node.trigger()
        return schemas.TriggerResponse(status="scheduled")

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🛰️  [BOOT] Iniciando API del notificador...")
    if not NodeContainer.has_instance():
        node = NodeFactory.create_notifier_node()
        node.start()
        NodeContainer.set_instance(node)
    try:
        yield
    finally:
        logger.info("🛑 Apagando notificador...")
        NodeContainer.shutdown()

app = FastAPI(title=settings.title, version=settings.version, lifespan=lifespan)

def get_notifier_service(node: NotifierNode = Depends(get_node_dependency)) -> NotifierService:
    return NotifierService(node)

@app.get("/status", response_model=schemas.NodeStatusResponse, tags=["Sistema"])
def get_status(service: NotifierService = Depends(get_notifier_service)):
    return service.get_status()

@app.get("/window", response_model=schemas.WindowResponse, tags=["Cadena"])
def get_window(service: NotifierService = Depends(get_notifier_service)):
    return service.get_window()

@app.get("/events", response_model=List[schemas.EventResponse], tags=["Cadena"])
def get_events(limit: int = Query(50, ge=1, le=1000), service: NotifierService = Depends(get_notifier_service)):
    return service.get_events(limit)

@app.post("/trigger", response_model=schemas.TriggerResponse, status_code=status.HTTP_202_ACCEPTED, tags=["Sistema"])
def trigger_round(service: NotifierService = Depends(get_notifier_service)):
    return service.trigger()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
