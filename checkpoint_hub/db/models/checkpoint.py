from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from checkpoint_hub.db.base import Base


class GameplayCheckpoint(Base):
    __tablename__ = "gameplay_checkpoints"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_edited_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    # Subject id of the authenticated creator. NULL for unattributed admin rows and legacy rows.
    owner_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)

    # SQLite only: never hand out the id of a deleted row again.
    __table_args__ = {"sqlite_autoincrement": True}
