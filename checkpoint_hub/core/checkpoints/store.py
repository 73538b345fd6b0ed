from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import Select, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from checkpoint_hub.db.models.checkpoint import GameplayCheckpoint
from checkpoint_hub.utils.clock import utc_now
from checkpoint_hub.utils.exceptions import StoreException

logger = logging.getLogger(__name__)


class CheckpointStore:
    """Persistence for the gameplay_checkpoints table.

    Every method takes an optional `owner_id`; when given it is added to the
    statement's WHERE clause. None means "no owner predicate". The store does
    not decide which of the two applies.

    Writes are single statements committed immediately. Backend failures are
    rolled back, logged and re-raised as StoreException.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _scoped(stmt, checkpoint_id: Optional[int], owner_id: Optional[str]):
        if checkpoint_id is not None:
            stmt = stmt.where(GameplayCheckpoint.id == checkpoint_id)
        if owner_id is not None:
            stmt = stmt.where(GameplayCheckpoint.owner_id == owner_id)
        return stmt

    async def _fail(self, operation: str, exc: SQLAlchemyError) -> StoreException:
        logger.exception("checkpoint_store.%s_failed", operation)
        try:
            await self.db.rollback()
        except SQLAlchemyError:
            logger.warning("checkpoint_store.rollback_failed op=%s", operation)
        return StoreException(details={"operation": operation})

    async def insert(self, *, owner_name: str, payload: str, owner_id: Optional[str]) -> GameplayCheckpoint:
        now = utc_now()
        checkpoint = GameplayCheckpoint(
            owner_name=owner_name,
            payload=payload,
            owner_id=owner_id,
            created_at=now,
            last_edited_at=now,
        )
        self.db.add(checkpoint)
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("insert", exc) from exc
        return checkpoint

    async def get(self, checkpoint_id: int, *, owner_id: Optional[str] = None) -> Optional[GameplayCheckpoint]:
        stmt = self._scoped(select(GameplayCheckpoint), checkpoint_id, owner_id)
        stmt = stmt.execution_options(populate_existing=True)
        try:
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise await self._fail("get", exc) from exc

    async def list(self, *, owner_id: Optional[str] = None) -> List[GameplayCheckpoint]:
        stmt: Select = self._scoped(select(GameplayCheckpoint), None, owner_id)
        stmt = stmt.order_by(GameplayCheckpoint.id.asc()).execution_options(populate_existing=True)
        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise await self._fail("list", exc) from exc

    async def update(
        self,
        checkpoint_id: int,
        *,
        owner_name: Optional[str] = None,
        payload: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> bool:
        """Apply the given fields and refresh last_edited_at. Returns True if a row matched."""
        values: dict = {"last_edited_at": utc_now()}
        if owner_name is not None:
            values["owner_name"] = owner_name
        if payload is not None:
            values["payload"] = payload

        stmt = self._scoped(update(GameplayCheckpoint), checkpoint_id, owner_id)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("update", exc) from exc
        return (result.rowcount or 0) > 0

    async def delete(self, checkpoint_id: int, *, owner_id: Optional[str] = None) -> bool:
        stmt = self._scoped(delete(GameplayCheckpoint), checkpoint_id, owner_id)
        stmt = stmt.execution_options(synchronize_session=False)
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("delete", exc) from exc
        return (result.rowcount or 0) > 0
