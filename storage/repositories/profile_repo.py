"""Profile repository: append-only inserts of submitted profiles."""

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from typing import Any

from config.constants import SaveStatus
from config.settings import settings
from storage.database import get_database
from storage.models import FieldValue, ProfileRecord

log = structlog.get_logger(__name__)


class ProfileRepository:
    def __init__(self, db: AsyncDatabase, collection_name: str | None = None) -> None:
        self._collection = db[collection_name or settings.collection_name]

    async def insert(self, record: ProfileRecord) -> Any:
        """Insert one record. Returns the generated document ID."""
        result = await self._collection.insert_one(record.to_document())
        return result.inserted_id


async def save_profile(
    fields: dict[str, FieldValue],
    image_path: str | None,
    db: AsyncDatabase | None = None,
) -> SaveStatus:
    """Build a ProfileRecord and insert it if the database is available.

    Insert errors are not retried and propagate to the caller.
    """
    record = ProfileRecord.from_submission(fields, image_path)
    db = db if db is not None else get_database()
    if db is None:
        log.warning("database_not_connected_skipping_save", name=record.name)
        return SaveStatus.NOT_CONNECTED

    inserted_id = await ProfileRepository(db).insert(record)
    log.info(
        "profile_saved",
        database=settings.db_name,
        collection=settings.collection_name,
        document_id=str(inserted_id),
        has_image=record.profile_image is not None,
    )
    return SaveStatus.SAVED
