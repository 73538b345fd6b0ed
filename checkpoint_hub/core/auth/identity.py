from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class Identity:
    """Verified caller of a single request.

    Built by an identity resolver for one request and passed explicitly to the
    checkpoint service; never stored anywhere that outlives the request.
    """

    subject_id: str
    is_admin: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.subject_id, str) or not self.subject_id.strip():
            raise ValueError("subject_id must be a non-empty string")

    @property
    def role(self) -> Literal["admin", "player"]:
        return "admin" if self.is_admin else "player"

    @property
    def owner_scope(self) -> Optional[str]:
        """Owner predicate for queries: None (unscoped) for admins, the subject id otherwise."""
        if self.is_admin:
            return None
        return self.subject_id
