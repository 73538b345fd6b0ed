from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from checkpoint_hub.api import deps
from checkpoint_hub.core.auth.identity import Identity
from checkpoint_hub.core.checkpoints.service import CheckpointService
from checkpoint_hub.schemas.checkpoint import (
    MAX_CHECKPOINT_ID,
    Checkpoint,
    CheckpointCreateRequest,
    CheckpointMessage,
    CheckpointUpdateRequest,
)
from checkpoint_hub.schemas.common import ErrorEnvelope

router = APIRouter()

CheckpointId = Annotated[int, Path(ge=1, le=MAX_CHECKPOINT_ID)]

_errors = {
    401: {"model": ErrorEnvelope},
    404: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
}


@router.post("", response_model=Checkpoint, status_code=status.HTTP_201_CREATED, responses=_errors)
async def create_checkpoint(
    data: CheckpointCreateRequest,
    db: AsyncSession = Depends(deps.get_db),
    identity: Identity = Depends(deps.get_identity),
):
    service = CheckpointService(db, identity)
    return await service.create(data)


@router.get("", response_model=List[Checkpoint], responses=_errors)
async def list_checkpoints(
    db: AsyncSession = Depends(deps.get_db),
    identity: Identity = Depends(deps.get_identity),
):
    service = CheckpointService(db, identity)
    return await service.list()


@router.get("/{checkpoint_id}", response_model=Checkpoint, responses=_errors)
async def get_checkpoint(
    checkpoint_id: CheckpointId,
    db: AsyncSession = Depends(deps.get_db),
    identity: Identity = Depends(deps.get_identity),
):
    service = CheckpointService(db, identity)
    return await service.get(checkpoint_id)


@router.put("/{checkpoint_id}", response_model=CheckpointMessage, responses=_errors)
@router.patch("/{checkpoint_id}", response_model=CheckpointMessage, responses=_errors)
async def update_checkpoint(
    checkpoint_id: CheckpointId,
    data: CheckpointUpdateRequest,
    db: AsyncSession = Depends(deps.get_db),
    identity: Identity = Depends(deps.get_identity),
):
    service = CheckpointService(db, identity)
    return await service.update(checkpoint_id, data)


@router.delete("/{checkpoint_id}", response_model=CheckpointMessage, responses=_errors)
async def delete_checkpoint(
    checkpoint_id: CheckpointId,
    db: AsyncSession = Depends(deps.get_db),
    identity: Identity = Depends(deps.get_identity),
):
    service = CheckpointService(db, identity)
    return await service.delete(checkpoint_id)
