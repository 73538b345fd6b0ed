from fastapi import APIRouter

from checkpoint_hub.api.v1 import checkpoints, health, session

api_router = APIRouter()

api_router.include_router(checkpoints.router, prefix="/gamecheckpoints", tags=["Checkpoints"])
api_router.include_router(session.router, prefix="/session", tags=["Session"])
api_router.include_router(health.router, tags=["Health"])
