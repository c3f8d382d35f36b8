# kosync/api/v1/routers/users.py
import logging

from fastapi import APIRouter, Depends, Request, status

from kosync.api.v1.deps import get_user_service, require_user
from kosync.core.client_ip import log_request
from kosync.core.errors import RegistrationDisabled, UserAlreadyExists, problem_response
from kosync.core.policies import Identity
from kosync.schemas.users import UserCreateIn, UserOut
from kosync.services import UserService

router = APIRouter(prefix="/users", tags=["auth"])


@router.get("/auth", response_model=UserOut)
async def authorise_user(request: Request, identity: Identity = Depends(require_user)):
    """
    Credential check used by KOReader's "Login" action.

    Returns:
        dict: {"username": ...} of the authenticated caller

    Raises:
        Unauthenticated (401): Missing/invalid headers or inactive account
    """
    log_request(request, logging.INFO, "User [%s] logged in.", identity.username)
    return {"username": identity.username}


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=UserOut)
async def create_user(
    request: Request,
    body: UserCreateIn,
    users: UserService = Depends(get_user_service),
):
    """
    Register a new account (anonymous).

    The password field carries the client key derived by KOReader.

    Returns:
        201 {"username": ...}

    Errors:
        402: Registration disabled or username taken (the status KOReader
             expects for both)
    """
    try:
        await users.create_user(body.username, body.password)
    except (RegistrationDisabled, UserAlreadyExists) as exc:
        log_request(request, logging.WARNING, "Account creation for [%s] refused: %s",
                    body.username, exc.message)
        return problem_response(exc, status.HTTP_402_PAYMENT_REQUIRED)

    log_request(request, logging.INFO, "User [%s] created.", body.username)
    return {"username": body.username}
