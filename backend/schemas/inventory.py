from typing import Optional

from pydantic import BaseModel, field_validator


class InventoryItemUpdate(BaseModel):
    # None means "leave unchanged"; an empty description clears it.
    # Blank names are rejected by the repository.
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip()


class InventoryItemOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = ""
    photo_url: Optional[str] = None

    class Config:
        from_attributes = True


class SearchResult(BaseModel):
    id: int
    name: str
    description: str


class PhotoUpdated(BaseModel):
    message: str
    photo: str


class ItemDeleted(BaseModel):
    message: str
    item: InventoryItemOut
