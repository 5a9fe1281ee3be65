"""
Inventory store exceptions
"""
from typing import Optional


class InventoryError(Exception):
    """Base exception for inventory store errors"""
    pass


class ValidationError(InventoryError):
    """Raised when a required field is missing or blank"""
    pass


class NotFound(InventoryError):
    """Base for record and attachment lookups that came back empty"""
    pass


class ItemNotFound(NotFound):
    """Raised when no inventory row has the requested id"""

    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found")


class AttachmentNotFound(NotFound):
    """Raised when an item has no photo, or its stored file is gone"""

    def __init__(self, ref: Optional[str] = None, item_id=None):
        self.ref = ref
        self.item_id = item_id
        if item_id is not None:
            message = f"Photo for item {item_id} not found"
        else:
            message = f"Attachment {ref!r} not found"
        super().__init__(message)


class StorageError(InventoryError):
    """Raised when the attachment directory is unavailable or unwritable"""
    pass


class PersistenceError(InventoryError):
    """Raised when the row store fails or rejects a write"""
    pass
