"""
Inventory service: keeps item rows and their photo files in agreement.

There is no transaction spanning the database and the photo directory, so
every operation that pairs or unpairs a row and a file runs in a fixed order:

- store-then-link: a new file is written before any row points at it. If the
  row write then fails the file is removed again.
- link-then-unlink: an old file is removed only after the row has been
  switched away from it. If the process dies in between, the old file is left
  behind as an orphan (see ``sweep_orphans``).

An orphaned file can be swept later; a row pointing at a missing file cannot
be repaired. Every ordering below prefers the former.

The service holds no state between calls. Current references are always
re-read from the repository.
"""

import logging
import mimetypes
from dataclasses import dataclass
from typing import List, Optional

from core.errors import AttachmentNotFound, ValidationError
from db.inventory_item import InventoryItem
from db.repository import InventoryRepository
from storage import LocalAttachmentStore, StagedUpload

logger = logging.getLogger(__name__)

DEFAULT_PHOTO_MEDIA_TYPE = "image/jpeg"


@dataclass
class PhotoContent:
    data: bytes
    media_type: str


class InventoryService:
    def __init__(self, repository: InventoryRepository, attachments: LocalAttachmentStore):
        self.repository = repository
        self.attachments = attachments

    def _store_upload(self, upload: StagedUpload) -> str:
        try:
            return self.attachments.store(upload.path, filename=upload.filename)
        except Exception:
            upload.discard()
            raise

    async def register(
        self,
        name: Optional[str],
        description: Optional[str] = None,
        upload: Optional[StagedUpload] = None,
    ) -> InventoryItem:
        """
        Create an item, optionally with a photo.

        The photo is stored before the row is inserted. If the insert fails the
        stored file is removed and the insert error is re-raised unchanged.
        """
        if upload is None:
            return await self.repository.create(name, description)

        if not (name or "").strip():
            upload.discard()
            raise ValidationError("inventory_name is required")

        ref = self._store_upload(upload)
        try:
            item = await self.repository.create(name, description, attachment_ref=ref)
        except Exception:
            logger.warning("Item insert failed, removing stored photo %s", ref)
            try:
                self.attachments.remove(ref)
            except Exception:
                logger.exception("Failed to remove photo %s after failed insert", ref)
            raise
        logger.info("Registered item %s with photo %s", item.id, ref)
        return item

    async def get_item(self, item_id: int) -> InventoryItem:
        return await self.repository.get(item_id)

    async def list_items(self) -> List[InventoryItem]:
        return await self.repository.list()

    async def update_item(
        self,
        item_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> InventoryItem:
        return await self.repository.update_fields(item_id, name=name, description=description)

    async def replace_photo(self, item_id: int, upload: StagedUpload) -> InventoryItem:
        """
        Swap an item's photo for a new one.

        Order: look up the item, store the new file, repoint the row, and only
        then remove the old file. A failed row update leaves the item on its
        old, still existing photo and the new file as an orphan.
        """
        try:
            current = await self.repository.get(item_id)
        except Exception:
            upload.discard()
            raise
        old_ref = current.attachment_ref

        new_ref = self._store_upload(upload)
        try:
            item = await self.repository.set_attachment_ref(item_id, new_ref)
        except Exception:
            logger.warning(
                "Photo update for item %s failed; new file %s left unreferenced", item_id, new_ref
            )
            raise

        if old_ref and old_ref != new_ref:
            try:
                self.attachments.remove(old_ref)
            except Exception:
                # The row is already consistent, the old file is just an orphan now
                logger.exception("Failed to remove replaced photo %s of item %s", old_ref, item_id)
        logger.info("Replaced photo of item %s: %s -> %s", item_id, old_ref, new_ref)
        return item

    async def delete_item(self, item_id: int) -> InventoryItem:
        """Delete the row, then the photo it pointed at."""
        item = await self.repository.delete(item_id)
        if item.attachment_ref:
            self.attachments.remove(item.attachment_ref)
        return item

    async def get_photo(self, item_id: int) -> PhotoContent:
        """
        Resolve an item's photo.

        Raises:
            ItemNotFound: If the item does not exist
            AttachmentNotFound: If the item has no photo or its file is gone
        """
        item = await self.repository.get(item_id)
        ref = item.attachment_ref
        if not ref or not self.attachments.exists(ref):
            if ref:
                logger.warning("Item %s references missing photo %s", item_id, ref)
            raise AttachmentNotFound(ref, item_id=item_id)
        try:
            data = self.attachments.read(ref)
        except AttachmentNotFound:
            # Removed after the existence check
            raise AttachmentNotFound(ref, item_id=item_id)
        media_type, _ = mimetypes.guess_type(ref)
        return PhotoContent(data=data, media_type=media_type or DEFAULT_PHOTO_MEDIA_TYPE)

    async def search(self, item_id: int, has_photo: bool = False) -> dict:
        """Look up one item; optionally mention its photo link in the description."""
        item = await self.repository.get(item_id)
        description = item.description or ""
        if has_photo and item.attachment_ref:
            description += f" [Photo: {item.photo_url}]"
        return {"id": item.id, "name": item.name, "description": description}

    async def sweep_orphans(self) -> List[str]:
        """
        Remove stored files that no item references. Returns the removed references.

        Files written by an upload that has not linked its row yet look like
        orphans too, so run this while no uploads are in flight.
        """
        referenced = await self.repository.referenced_refs()
        removed = []
        for ref in self.attachments.list_refs():
            if ref not in referenced:
                self.attachments.remove(ref)
                removed.append(ref)
        if removed:
            logger.info("Swept %d orphaned photo(s)", len(removed))
        return removed
