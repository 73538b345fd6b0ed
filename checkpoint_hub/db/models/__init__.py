from checkpoint_hub.db.base import Base
from .checkpoint import GameplayCheckpoint

__all__ = [
    "Base",
    "GameplayCheckpoint",
]
