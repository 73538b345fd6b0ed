from typing import Literal

from pydantic import BaseModel


class SessionInfo(BaseModel):
    subject_id: str
    is_admin: bool
    role: Literal["admin", "player"]
