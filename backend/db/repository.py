"""
Record repository for inventory rows.

Every operation opens its own session and commits before returning, so callers
always observe the committed state. The repository never touches attachment
storage; pairing rows with files is the job of the inventory service.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.errors import ItemNotFound, PersistenceError, ValidationError
from db.inventory_item import InventoryItem

logger = logging.getLogger(__name__)


def _required_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("inventory_name is required")
    return name


class InventoryRepository:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def create(
        self,
        name: Optional[str],
        description: Optional[str] = None,
        attachment_ref: Optional[str] = None,
    ) -> InventoryItem:
        """
        Insert a new row and return it with its assigned id.

        Raises:
            ValidationError: if name is missing or blank
            PersistenceError: if the insert fails
        """
        model = InventoryItem(
            name=_required_name(name),
            description=description or "",
            attachment_ref=attachment_ref,
        )
        try:
            async with self.session_maker() as db:
                db.add(model)
                await db.commit()
                await db.refresh(model)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create item: {e}") from e
        return model

    async def get(self, item_id: int) -> InventoryItem:
        try:
            async with self.session_maker() as db:
                model = await db.get(InventoryItem, item_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load item {item_id}: {e}") from e
        if model is None:
            raise ItemNotFound(item_id)
        return model

    async def list(self) -> List[InventoryItem]:
        try:
            async with self.session_maker() as db:
                res = await db.execute(select(InventoryItem).order_by(InventoryItem.id.asc()))
                return list(res.scalars().all())
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list items: {e}") from e

    async def update_fields(
        self,
        item_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> InventoryItem:
        """
        Merge-patch name and description. None leaves a field unchanged; an
        empty description clears it, an empty name is rejected.
        """
        if name is not None:
            name = _required_name(name)
        try:
            async with self.session_maker() as db:
                model = await db.get(InventoryItem, item_id)
                if model is None:
                    raise ItemNotFound(item_id)
                if name is not None:
                    model.name = name
                if description is not None:
                    model.description = description
                await db.commit()
                await db.refresh(model)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update item {item_id}: {e}") from e
        return model

    async def set_attachment_ref(self, item_id: int, ref: Optional[str]) -> InventoryItem:
        """Point the row at a stored object, or clear it. Lifecycle use only."""
        try:
            async with self.session_maker() as db:
                model = await db.get(InventoryItem, item_id)
                if model is None:
                    raise ItemNotFound(item_id)
                model.attachment_ref = ref
                await db.commit()
                await db.refresh(model)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to set photo for item {item_id}: {e}") from e
        return model

    async def delete(self, item_id: int) -> InventoryItem:
        """Remove the row and return it as it was, attachment_ref included."""
        try:
            async with self.session_maker() as db:
                model = await db.get(InventoryItem, item_id)
                if model is None:
                    raise ItemNotFound(item_id)
                await db.delete(model)
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete item {item_id}: {e}") from e
        logger.info("Deleted item %s", item_id)
        return model

    async def referenced_refs(self) -> set:
        try:
            async with self.session_maker() as db:
                res = await db.execute(
                    select(InventoryItem.attachment_ref).where(InventoryItem.attachment_ref.is_not(None))
                )
                return {row[0] for row in res.all()}
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read photo references: {e}") from e
