# chn/interface/api/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

class ImmutableModel(BaseModel):
    """
    Clase base que fuerza la inmutabilidad (frozen=True).
    Lo que sale por la API es una copia, nunca el estado interno del rastreador.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra='ignore'
    )

# --- ESTADO ---

class NodeStatusResponse(ImmutableModel):
    network: str
    running: bool
    best_block_hash: Optional[str] = None
    tip_hash: Optional[str] = None
    tip_height: Optional[int] = None
    window_size: int
    rounds: int
    consecutive_failures: int
    last_error: Optional[str] = None
    p2p_connected: bool

# --- VENTANA ---

class HeaderResponse(ImmutableModel):
    hash: str
    previous_hash: str
    height: Optional[int] = None
    timestamp: int

class WindowResponse(ImmutableModel):
    size: int
    headers: List[HeaderResponse] = Field(default_factory=list, description="Del más antiguo al más reciente")

# --- EVENTOS ---

class EventResponse(ImmutableModel):
    sequence: int
    type: str
    hash: str
    previous_hash: str
    height: Optional[int] = None
    tx_count: int
    recorded_at: float

class TriggerResponse(ImmutableModel):
    status: str
