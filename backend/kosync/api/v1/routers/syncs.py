# kosync/api/v1/routers/syncs.py
import logging

from fastapi import APIRouter, Depends, Request

from kosync.api.v1.deps import get_progress_body, get_sync_service, require_user
from kosync.core.client_ip import log_request
from kosync.core.policies import Identity
from kosync.core.responses import DecimalJSONResponse
from kosync.schemas.sync import ProgressIn, ProgressOut, ProgressUpdateOut
from kosync.services import SyncService

router = APIRouter(prefix="/syncs", tags=["sync"])


@router.put(
    "/progress",
    response_model=ProgressUpdateOut,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ProgressIn.model_json_schema()}},
        }
    },
)
async def update_progress(
    request: Request,
    identity: Identity = Depends(require_user),
    body: ProgressIn = Depends(get_progress_body),
    sync: SyncService = Depends(get_sync_service),
):
    """
    Store the reading position reported by a device.

    The previous record for the same document is replaced entirely and the
    timestamp is set from the server clock.

    Returns:
        dict: {"document": hash, "timestamp": unix seconds}
    """
    document = await sync.update_progress(identity.username, body.document, body)
    log_request(
        request, logging.INFO,
        "Received progress update for user [%s] from device [%s] with document hash [%s].",
        identity.username, body.device, body.document,
    )
    return {"document": document.document_hash, "timestamp": document.epoch_seconds}


@router.get("/progress/{document_hash}", response_model=ProgressOut, response_class=DecimalJSONResponse)
async def get_progress(
    request: Request,
    document_hash: str,
    identity: Identity = Depends(require_user),
    sync: SyncService = Depends(get_sync_service),
):
    """
    Return the last stored position of a document.

    The percentage is written back with exactly the digits that were stored.

    Raises:
        DocumentNotFound (404): The document was never synced by this user
    """
    document = await sync.get_progress(identity.username, document_hash)
    log_request(request, logging.INFO,
                "Received progress request for user [%s] with document hash [%s].",
                identity.username, document_hash)
    out = ProgressOut(
        device=document.device,
        device_id=document.device_id,
        document=document.document_hash,
        percentage=document.percentage,
        progress=document.progress,
        timestamp=document.epoch_seconds,
    )
    return DecimalJSONResponse(out.model_dump())
