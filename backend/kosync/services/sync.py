"""
Sync Service

Reads and writes reading progress. Updates are last-writer-wins: each one
replaces the stored record for the (user, document) pair and is stamped with
the server clock, whatever the device reported earlier.
"""
import datetime as dt
import logging
from typing import List

from kosync.core.errors import DocumentNotFound, UserNotFound
from kosync.repositories.base import KosyncRepository, Progress
from kosync.schemas.sync import ProgressIn

logger = logging.getLogger(__name__)


def utc_now() -> dt.datetime:
    """
    Get current UTC datetime with timezone information.
    """
    return dt.datetime.now(dt.timezone.utc)


class SyncService:
    def __init__(self, repository: KosyncRepository):
        self._repository = repository

    async def update_progress(self, username: str, document_hash: str, payload: ProgressIn) -> Progress:
        """
        Store the latest position of a document for a user.

        Parameters:
        - username: Authenticated owner
        - document_hash: Document the progress belongs to
        - payload: Values reported by the device

        Returns:
        - Progress: The stored record, timestamp included

        Raises:
        - UserNotFound: The owner was deleted while the request was running
        """
        logger.info("Updating progress for document %s for user %s", document_hash, username)

        previous = await self._repository.get_document(username, document_hash)
        if previous is None:
            logger.info("No existing progress found for document %s for user %s", document_hash, username)
        else:
            logger.debug("Replacing progress %s (%s) from device %s",
                         previous.progress, previous.percentage, previous.device)

        document = Progress(
            document_hash=document_hash,
            progress=payload.progress,
            percentage=payload.percentage,
            device=payload.device,
            device_id=payload.device_id,
            timestamp=utc_now(),
        )

        if not await self._repository.upsert_document(username, document):
            logger.error("Failed to update progress for document %s for user %s", document_hash, username)
            raise UserNotFound(username)

        return document

    async def get_progress(self, username: str, document_hash: str) -> Progress:
        logger.info("Retrieving progress for document %s for user %s", document_hash, username)

        document = await self._repository.get_document(username, document_hash)
        if document is None:
            logger.warning("No progress found for document %s for user %s", document_hash, username)
            raise DocumentNotFound(username, document_hash)
        return document

    async def list_documents(self, username: str) -> List[Progress]:
        user = await self._repository.get_user_by_username(username)
        if user is None:
            raise UserNotFound(username)
        return await self._repository.list_documents(username)

    async def remove_document(self, username: str, document_hash: str) -> None:
        user = await self._repository.get_user_by_username(username)
        if user is None:
            raise UserNotFound(username)
        if document_hash not in user.documents:
            raise DocumentNotFound(username, document_hash)

        if not await self._repository.remove_document(username, document_hash):
            # Removed concurrently between the lookup and the delete
            raise DocumentNotFound(username, document_hash)
        logger.info("Removed document %s of user %s", document_hash, username)
