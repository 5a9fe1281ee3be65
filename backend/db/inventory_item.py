from sqlalchemy import Column, Integer, String, Text

from .database import Base


class InventoryItem(Base):
    """An inventory record with at most one photo in attachment storage."""
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True, default="")

    # Opaque reference returned by the attachment store; NULL means no photo
    attachment_ref = Column("photo", Text, nullable=True)

    @property
    def photo_url(self):
        if not self.attachment_ref:
            return None
        return f"/inventory/{self.id}/photo"

    def __repr__(self) -> str:
        return f"InventoryItem(id={self.id!r}, name={self.name!r}, attachment_ref={self.attachment_ref!r})"
