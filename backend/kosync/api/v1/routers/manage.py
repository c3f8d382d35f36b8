# kosync/api/v1/routers/manage.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from kosync.api.v1.deps import get_sync_service, get_user_service, require_admin
from kosync.core.client_ip import log_request
from kosync.core.policies import Identity
from kosync.core.responses import DecimalJSONResponse
from kosync.schemas.users import (
    DocumentOut,
    MessageOut,
    PasswordChangeIn,
    UserCreateIn,
    UserOut,
    UserSummaryOut,
)
from kosync.services import SyncService, UserService

# Every route below requires an active administrator
router = APIRouter(prefix="/manage/users", tags=["manage"])


# ==============================================================================
# I. User Management Interface
#     Prefix: /manage/users
# ==============================================================================
@router.get("", response_model=List[UserSummaryOut])
async def list_users(
    request: Request,
    admin: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """
    List all accounts with their document counts (admin only).
    """
    summaries = await users.list_users()
    log_request(request, logging.INFO, "User [%s] requested /manage/users", admin.username)
    return [UserSummaryOut(**s.model_dump()) for s in summaries]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserOut)
async def create_user(
    request: Request,
    body: UserCreateIn,
    admin: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """
    Create an account from a plaintext password (admin only).

    Works even when public registration is disabled.

    Raises:
        InvalidInput (400): Empty or whitespace-only password
        UserAlreadyExists (409): Username taken
    """
    await users.create_user_with_password(body.username, body.password)
    log_request(request, logging.INFO, "User [%s] created by user [%s]", body.username, admin.username)
    return {"username": body.username}


@router.delete("", response_model=MessageOut)
async def delete_user(
    request: Request,
    username: str = Query(...),
    admin: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """
    Delete an account and all of its progress (admin only).

    Raises:
        UserNotFound (404): No such account
        Forbidden (403): Target is the reserved admin account
    """
    await users.delete_user(username)
    log_request(request, logging.INFO, "User [%s] deleted by user [%s]", username, admin.username)
    return {"message": "Success"}


@router.put("/active", response_model=MessageOut)
async def set_user_active(
    request: Request,
    username: str = Query(...),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    admin: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """
    Activate or deactivate an account (admin only).

    Without isActive the current state is flipped.

    Raises:
        UserNotFound (404): No such account
        Forbidden (403): Target is the reserved admin account
    """
    user = await users.set_active(username, is_active)
    state = "active" if user.is_active else "inactive"
    log_request(request, logging.INFO, "User [%s] set to %s by user [%s]", username, state, admin.username)
    return {"message": f"User marked as {state}"}


@router.put("/password", response_model=MessageOut)
async def set_user_password(
    request: Request,
    body: PasswordChangeIn,
    username: str = Query(...),
    admin: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """
    Reset an account's password (admin only).

    Raises:
        InvalidInput (400): Empty or whitespace-only password
        UserNotFound (404): No such account
        Forbidden (403): Target is the reserved admin account
    """
    await users.set_password(username, body.password)
    log_request(request, logging.INFO, "User [%s]'s password updated by [%s].", username, admin.username)
    return {"message": "Password changed successfully"}


# ==============================================================================
# II. Document Management Interface
#     Prefix: /manage/users/documents
# ==============================================================================
@router.get("/documents", response_model=List[DocumentOut], response_class=DecimalJSONResponse)
async def list_user_documents(
    username: str = Query(...),
    admin: Identity = Depends(require_admin),
    sync: SyncService = Depends(get_sync_service),
):
    """
    List the stored progress of one account (admin only).

    Raises:
        UserNotFound (404): No such account
    """
    documents = await sync.list_documents(username)
    return DecimalJSONResponse([
        DocumentOut(
            document_hash=d.document_hash,
            progress=d.progress,
            percentage=d.percentage,
            device=d.device,
            device_id=d.device_id,
            timestamp=d.epoch_seconds,
        ).model_dump(by_alias=True)
        for d in documents
    ])


@router.delete("/documents", response_model=MessageOut)
async def delete_user_document(
    request: Request,
    username: str = Query(...),
    document_hash: str = Query(..., alias="documentHash"),
    admin: Identity = Depends(require_admin),
    sync: SyncService = Depends(get_sync_service),
):
    """
    Remove one document's progress from an account (admin only).

    Raises:
        UserNotFound (404): No such account
        DocumentNotFound (404): The account has no such document
    """
    await sync.remove_document(username, document_hash)
    log_request(request, logging.INFO, "Document [%s] of user [%s] removed by user [%s]",
                document_hash, username, admin.username)
    return {"message": "Success"}
