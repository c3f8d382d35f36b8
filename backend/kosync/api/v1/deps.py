from fastapi import Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from kosync.config import Settings, get_settings
from kosync.core.policies import Identity, Policy, authorize
from kosync.core.responses import loads
from kosync.core.security import authenticate
from kosync.repositories import KosyncRepository, TortoiseKosyncRepository
from kosync.schemas.sync import ProgressIn
from kosync.services import SyncService, UserService


def get_repository() -> KosyncRepository:
    """FastAPI dependency providing the account/progress store."""
    return TortoiseKosyncRepository()


def get_sync_service(repository: KosyncRepository = Depends(get_repository)) -> SyncService:
    return SyncService(repository)


def get_user_service(
    repository: KosyncRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(repository, settings)


async def get_identity(
    repository: KosyncRepository = Depends(get_repository),
    x_auth_user: str | None = Header(default=None),
    x_auth_key: str | None = Header(default=None),
) -> Identity:
    """
    FastAPI dependency authenticating the caller from the KOReader headers.

    Both x-auth-user and x-auth-key are re-validated against the store on
    every request; there is no session or token.

    Raises:
        Unauthenticated (401): Missing headers, unknown user or wrong key
    """
    return await authenticate(repository, x_auth_user, x_auth_key)


async def require_user(identity: Identity = Depends(get_identity)) -> Identity:
    """
    FastAPI dependency for endpoints open to any active account.

    Usage:
        @router.get("/protected")
        async def protected_route(identity: Identity = Depends(require_user)):
            return {"username": identity.username}
    """
    return authorize(identity, Policy.AUTHENTICATED)


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    """
    FastAPI dependency for administrator-only endpoints.

    Raises:
        Unauthenticated (401): Not authenticated or account inactive
        Forbidden (403): Active account without the administrator claim
    """
    return authorize(identity, Policy.ADMINISTRATOR)


async def get_progress_body(request: Request) -> ProgressIn:
    """
    FastAPI dependency parsing the body of PUT /syncs/progress.

    Numbers are read as Decimal so the percentage keeps every digit the
    device sent.

    Raises:
        RequestValidationError (422): Malformed JSON or invalid fields
    """
    try:
        data = loads(await request.body())
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}, "ctx": {"error": str(exc)}}]
        )
    try:
        return ProgressIn.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors(include_url=False)]
        )
