import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.config import Settings
from core.errors import StorageError
from db.database import create_db_and_tables, make_engine, make_session_maker
from db.repository import InventoryRepository
from services.inventory_service import InventoryService
from storage import LocalAttachmentStore

logger = logging.getLogger(__name__)


@dataclass
class StoreContext:
    """Process-owned handles for the row store and the photo directory."""
    settings: Settings
    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]
    attachments: LocalAttachmentStore
    repository: InventoryRepository
    service: InventoryService

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreContext":
        if not settings.cache_dir:
            raise StorageError("Cache directory is not configured (use --cache or CACHE_DIR)")
        engine = make_engine(settings.database_url, echo=settings.database_echo)
        session_maker = make_session_maker(engine)
        attachments = LocalAttachmentStore(settings.cache_dir)
        repository = InventoryRepository(session_maker)
        return cls(
            settings=settings,
            engine=engine,
            session_maker=session_maker,
            attachments=attachments,
            repository=repository,
            service=InventoryService(repository, attachments),
        )

    async def start(self):
        await create_db_and_tables(self.engine)
        logger.info("Inventory store ready (photos in %s)", self.attachments.root)

    async def close(self):
        await self.engine.dispose()
