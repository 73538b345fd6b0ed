from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from checkpoint_hub.utils.clock import ensure_utc

# Largest id the database column can hold (signed 64-bit).
MAX_CHECKPOINT_ID = 2**63 - 1


# Request bodies also accept the field names used by the first client release
# (user_name / checkpoint_data / player_id).

class CheckpointCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    owner_name: str = Field(..., max_length=255, validation_alias=AliasChoices("owner_name", "user_name"))
    payload: str = Field(..., validation_alias=AliasChoices("payload", "checkpoint_data"))
    # Honored for admins only; players are always bound to their own subject id.
    owner_id: Optional[str] = Field(
        default=None, max_length=255, validation_alias=AliasChoices("owner_id", "player_id")
    )


class CheckpointUpdateRequest(BaseModel):
    """Partial update. Ownership and timestamps are not client-settable."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = Field(default=None, ge=1, le=MAX_CHECKPOINT_ID)
    owner_name: Optional[str] = Field(
        default=None, max_length=255, validation_alias=AliasChoices("owner_name", "user_name")
    )
    payload: Optional[str] = Field(default=None, validation_alias=AliasChoices("payload", "checkpoint_data"))


class Checkpoint(BaseModel):
    id: int
    owner_name: str
    payload: str
    created_at: datetime
    last_edited_at: datetime
    owner_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "last_edited_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class CheckpointMessage(BaseModel):
    message: str
