"""Async MongoDB connection manager with bounded connect retry."""

import itertools

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import CollectionInvalid, OperationFailure

from config.constants import (
    CONNECT_RETRY_DELAY,
    MAX_CONNECT_ATTEMPTS,
    MONGO_TIMEOUTS,
    NAMESPACE_EXISTS_CODE,
)
from config.settings import settings
from utils.retry import async_retry, sanitize_error

log = structlog.get_logger(__name__)

_client: AsyncMongoClient | None = None
_db: AsyncDatabase | None = None


async def _ensure_collection(db: AsyncDatabase, name: str) -> None:
    """Create the target collection if absent; "already exists" is success."""
    try:
        await db.create_collection(name)
        log.info("collection_created", collection=name)
    except CollectionInvalid:
        log.info("collection_exists", collection=name)
    except OperationFailure as e:
        if e.code == NAMESPACE_EXISTS_CODE:
            log.info("collection_exists", collection=name)
        else:
            log.warning("collection_create_note", collection=name, error=sanitize_error(str(e)))


async def _open(attempts: itertools.count, max_attempts: int) -> tuple[AsyncMongoClient, AsyncDatabase]:
    attempt = next(attempts)
    log.info(
        "database_connect_attempt",
        attempt=attempt,
        max_attempts=max_attempts,
        url=sanitize_error(settings.connection_url),
    )
    client: AsyncMongoClient = AsyncMongoClient(settings.connection_url, **MONGO_TIMEOUTS)
    try:
        db = client[settings.db_name]
        await db.command("ping")

        existing = await db.list_collection_names()
        log.info("database_collections", database=settings.db_name, collections=existing)

        if settings.collection_name not in existing:
            await _ensure_collection(db, settings.collection_name)
    except BaseException:
        # Includes cancellation when shutdown interrupts an attempt
        await client.close()
        raise
    return client, db


async def connect(
    max_attempts: int = MAX_CONNECT_ATTEMPTS,
    delay: float = CONNECT_RETRY_DELAY,
) -> AsyncDatabase | None:
    """Open the database handle, retrying with a fixed delay.

    Returns the handle, or None once every attempt has failed. Failure is
    never raised: the service keeps running and skips persistence.
    """
    global _client, _db
    if _db is not None:
        return _db

    opener = async_retry(max_attempts=max_attempts, delay=delay, backoff=1.0)(_open)
    try:
        _client, _db = await opener(itertools.count(1), max_attempts)
    except Exception as e:
        log.error(
            "database_connect_failed",
            attempts=max_attempts,
            error=sanitize_error(str(e)),
            hint="check that the MongoDB container is running and the credentials are correct",
        )
        return None

    log.info(
        "database_connected",
        database=settings.db_name,
        collection=settings.collection_name,
    )
    return _db


def get_database() -> AsyncDatabase | None:
    """Return the open database handle, or None when running degraded."""
    return _db


async def close_client() -> None:
    """Close the MongoDB client."""
    global _client, _db
    if _client is not None:
        await _client.close()
        log.info("database_connection_closed")
    _client = None
    _db = None
