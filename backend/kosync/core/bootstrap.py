# kosync/core/bootstrap.py
"""
Bootstrap module for application initialization.
Makes sure the reserved admin account exists on every startup.
"""
import logging
from kosync.config import Settings
from kosync.core.security import client_key, hash_password
from kosync.repositories.base import KosyncRepository, UserAccount
from kosync.services.users import RESERVED_ADMIN

logger = logging.getLogger("uvicorn.error")

DEFAULT_ADMIN_PASSWORD = "admin"


async def ensure_default_admin(repository: KosyncRepository, settings: Settings) -> UserAccount:
    """
    Create or repair the reserved "admin" account.

    The account is forced back to an active administrator and its password
    is reset from ADMIN_PASSWORD (default: "admin") on every start, so the
    operator can always regain access by restarting the server.
    """
    admin_password = settings.admin_password
    if not admin_password:
        logger.warning("[bootstrap] ADMIN_PASSWORD not set -> using the default admin password.")
        admin_password = DEFAULT_ADMIN_PASSWORD

    password_hash = hash_password(client_key(admin_password))

    admin = await repository.get_user_by_username(RESERVED_ADMIN)
    if admin is None:
        admin = await repository.create_user(
            UserAccount(
                username=RESERVED_ADMIN,
                password_hash=password_hash,
                is_active=True,
                is_administrator=True,
            )
        )
        logger.warning("[bootstrap] Created default admin -> username=%s id=%s", admin.username, admin.id)
    else:
        await repository.update_account(
            RESERVED_ADMIN,
            password_hash=password_hash,
            is_active=True,
            is_administrator=True,
        )
        admin = admin.model_copy(
            update={"password_hash": password_hash, "is_active": True, "is_administrator": True}
        )

    users = await repository.list_users()
    documents = await repository.total_document_count()
    logger.info("[bootstrap] %d user(s), %d synced document(s)", len(users), documents)
    return admin
