"""
User Service

Account lifecycle: registration, deletion, activation and password resets.
Callers of everything except registration must already hold the
administrator claim (enforced by the routers). On top of that the reserved
"admin" account can never be deleted, deactivated or have its password
reset here.
"""
import logging
from typing import List, Optional

from pydantic import BaseModel

from kosync.config import Settings
from kosync.core.errors import (
    Forbidden,
    InvalidInput,
    RegistrationDisabled,
    UserAlreadyExists,
    UserNotFound,
)
from kosync.core.security import client_key, hash_password
from kosync.repositories.base import DuplicateKeyError, KosyncRepository, UserAccount

logger = logging.getLogger(__name__)

RESERVED_ADMIN = "admin"


class UserSummary(BaseModel):
    """Account without credentials, as listed to administrators"""
    id: Optional[str] = None
    username: str
    is_active: bool
    is_administrator: bool
    document_count: int


class UserService:
    def __init__(self, repository: KosyncRepository, settings: Settings):
        self._repository = repository
        self._registration_enabled = settings.registration_enabled

    async def get_user(self, username: str) -> Optional[UserAccount]:
        return await self._repository.get_user_by_username(username)

    async def create_user(self, username: str, key: str, *, enforce_registration: bool = True) -> UserAccount:
        """
        Register a new active, non-administrator account.

        Parameters:
        - username: Unique, case-sensitive login name
        - key: Client key (what the device will send in x-auth-key)
        - enforce_registration: Honour the registration toggle; administrators
          creating accounts pass False

        Raises:
        - RegistrationDisabled: Registration is switched off
        - InvalidInput: Empty username or key
        - UserAlreadyExists: Username taken
        """
        logger.info("Creating user with username: %s", username)

        if enforce_registration and not self._registration_enabled:
            logger.warning("Account creation attempted but registration is disabled.")
            raise RegistrationDisabled()

        if not username or not key:
            raise InvalidInput("Username and password are required")

        if await self._repository.get_user_by_username(username) is not None:
            raise UserAlreadyExists(username)

        try:
            return await self._repository.create_user(
                UserAccount(
                    username=username,
                    password_hash=hash_password(key),
                    is_active=True,
                    is_administrator=False,
                )
            )
        except DuplicateKeyError:
            # Lost a race against a concurrent registration of the same name
            raise UserAlreadyExists(username)

    async def create_user_with_password(self, username: str, password: str) -> UserAccount:
        """Administrator variant: takes a plaintext password, ignores the registration toggle."""
        _require_password(password)
        return await self.create_user(username, client_key(password), enforce_registration=False)

    async def delete_user(self, username: str) -> None:
        logger.info("Deleting user with username: %s", username)

        user = await self._repository.get_user_by_username(username)
        if user is None:
            logger.error("User not found: %s", username)
            raise UserNotFound(username)

        _protect_reserved(username)

        if not await self._repository.delete_user(username):
            logger.error("Failed to delete user with username: %s", username)
            raise UserNotFound(username)

    async def set_active(self, username: str, is_active: Optional[bool] = None) -> UserAccount:
        """
        Activate or deactivate an account.

        Parameters:
        - is_active: New state; None flips the current one

        Returns:
        - UserAccount: The updated account
        """
        logger.info("Updating status for user: %s", username)

        user = await self._repository.get_user_by_username(username)
        if user is None:
            logger.error("User not found: %s", username)
            raise UserNotFound(username)

        _protect_reserved(username)

        is_active = (not user.is_active) if is_active is None else is_active
        if not await self._repository.update_account(username, is_active=is_active):
            raise UserNotFound(username)
        return user.model_copy(update={"is_active": is_active})

    async def set_password(self, username: str, new_password: str) -> None:
        logger.info("Updating password for user: %s", username)

        # KOReader refuses to log in with a blank or whitespace-only password
        _require_password(new_password)

        user = await self._repository.get_user_by_username(username)
        if user is None:
            logger.error("User not found: %s", username)
            raise UserNotFound(username)

        _protect_reserved(username)

        password_hash = hash_password(client_key(new_password))
        if not await self._repository.update_account(username, password_hash=password_hash):
            logger.error("Failed to update password for user: %s", username)
            raise UserNotFound(username)

    async def list_users(self) -> List[UserSummary]:
        logger.info("Retrieving all users")

        users = await self._repository.list_users()
        return [
            UserSummary(
                id=u.id,
                username=u.username,
                is_active=u.is_active,
                is_administrator=u.is_administrator,
                document_count=len(u.documents),
            )
            for u in users
        ]


def _require_password(password: str) -> None:
    if not password or not password.strip():
        raise InvalidInput("Password cannot be empty or whitespace")


def _protect_reserved(username: str) -> None:
    if username == RESERVED_ADMIN:
        logger.warning("Attempt to modify the reserved admin account")
        raise Forbidden("Cannot update admin user")
