from fastapi import APIRouter, Depends

from checkpoint_hub.api import deps
from checkpoint_hub.core.auth.identity import Identity
from checkpoint_hub.schemas.session import SessionInfo

router = APIRouter()


@router.get("", response_model=SessionInfo)
async def whoami(identity: Identity = Depends(deps.get_identity)) -> SessionInfo:
    return SessionInfo(subject_id=identity.subject_id, is_admin=identity.is_admin, role=identity.role)
