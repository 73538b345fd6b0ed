from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from checkpoint_hub.core.auth.identity import Identity
from checkpoint_hub.core.checkpoints.store import CheckpointStore
from checkpoint_hub.schemas.checkpoint import (
    Checkpoint,
    CheckpointCreateRequest,
    CheckpointMessage,
    CheckpointUpdateRequest,
)
from checkpoint_hub.utils.exceptions import BadRequestException, NotFoundException, StoreException
from checkpoint_hub.utils.metrics import CHECKPOINT_OPERATIONS_TOTAL
from checkpoint_hub.utils.observability import log_duration

logger = logging.getLogger(__name__)


def _require_text(field: str, value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise BadRequestException(f"{field} must not be empty", details={"field": field})
    return value


class CheckpointService:
    """Checkpoint operations on behalf of one caller.

    Admins act on every row. Players act only on rows whose owner_id equals
    their subject id: the predicate comes from ``identity.owner_scope`` and is
    always part of the SQL statement, so a foreign row and a missing row both
    come back as NotFoundException.
    """

    def __init__(self, db: AsyncSession, identity: Identity):
        self.identity = identity
        self.store = CheckpointStore(db)

    @contextmanager
    def _operation(self, name: str, **fields: object) -> Iterator[None]:
        scope = self.identity.role
        result = "error"
        try:
            with log_duration(logger, f"checkpoints.{name}", scope=scope, **fields):
                yield
            result = "ok"
        except NotFoundException:
            result = "not_found"
            raise
        except BadRequestException:
            result = "invalid"
            raise
        finally:
            CHECKPOINT_OPERATIONS_TOTAL.labels(operation=name, scope=scope, result=result).inc()

    async def create(self, data: CheckpointCreateRequest) -> Checkpoint:
        with self._operation("create"):
            owner_name = _require_text("owner_name", data.owner_name)
            payload = _require_text("payload", data.payload)

            if self.identity.is_admin:
                owner_id = (data.owner_id or "").strip() or None
            else:
                if data.owner_id and data.owner_id != self.identity.subject_id:
                    logger.info("checkpoints.create owner_override_ignored")
                owner_id = self.identity.subject_id

            row = await self.store.insert(owner_name=owner_name, payload=payload, owner_id=owner_id)
            return Checkpoint.model_validate(row)

    async def get(self, checkpoint_id: int) -> Checkpoint:
        with self._operation("get", checkpoint_id=checkpoint_id):
            row = await self.store.get(checkpoint_id, owner_id=self.identity.owner_scope)
            if row is None:
                raise NotFoundException()
            return Checkpoint.model_validate(row)

    async def list(self) -> List[Checkpoint]:
        with self._operation("list"):
            rows = await self.store.list(owner_id=self.identity.owner_scope)
            items: List[Checkpoint] = []
            for row in rows:
                try:
                    items.append(Checkpoint.model_validate(row))
                except ValidationError as exc:
                    # A row that cannot be rendered fails the whole listing; results are never truncated silently.
                    logger.error("checkpoints.list unreadable_row id=%s errors=%s", row.id, exc.errors())
                    raise StoreException(details={"operation": "list"}) from exc
            return items

    async def update(self, checkpoint_id: int, patch: CheckpointUpdateRequest) -> CheckpointMessage:
        with self._operation("update", checkpoint_id=checkpoint_id):
            if patch.id is not None and patch.id != checkpoint_id:
                raise BadRequestException(
                    "ID in URL and request body do not match",
                    details={"path_id": checkpoint_id, "body_id": patch.id},
                )
            if patch.owner_name is None and patch.payload is None:
                raise BadRequestException("No changes provided")
            if patch.owner_name is not None:
                _require_text("owner_name", patch.owner_name)
            if patch.payload is not None:
                _require_text("payload", patch.payload)

            matched = await self.store.update(
                checkpoint_id,
                owner_name=patch.owner_name,
                payload=patch.payload,
                owner_id=self.identity.owner_scope,
            )
            if not matched:
                raise NotFoundException()
            return CheckpointMessage(message="Checkpoint updated successfully")

    async def delete(self, checkpoint_id: int) -> CheckpointMessage:
        with self._operation("delete", checkpoint_id=checkpoint_id):
            matched = await self.store.delete(checkpoint_id, owner_id=self.identity.owner_scope)
            if not matched:
                raise NotFoundException()
            return CheckpointMessage(message="Checkpoint deleted successfully")
