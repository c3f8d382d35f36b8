# kosync/core/policies.py
"""
Authorization policies.

The authenticator produces an immutable Identity for every request; the two
named policies below decide whether that identity may use an endpoint.
"""
import enum

from pydantic import BaseModel, ConfigDict

from kosync.core.errors import Forbidden, Unauthenticated


class Identity(BaseModel):
    """Claims asserted for the caller of one request."""
    model_config = ConfigDict(frozen=True)

    username: str
    is_active: bool
    is_administrator: bool


class Policy(str, enum.Enum):
    AUTHENTICATED = "authenticated"    # active account
    ADMINISTRATOR = "administrator"    # active administrator account


def authorize(identity: Identity, policy: Policy) -> Identity:
    """
    Check an identity against a policy.

    Args:
        identity: Claims produced by the authenticator
        policy: Policy guarding the endpoint

    Returns:
        Identity: The same identity when the policy is satisfied

    Raises:
        Unauthenticated: The account is deactivated (applies to both policies,
            so a deactivated administrator is locked out too)
        Forbidden: ADMINISTRATOR was required and the caller is not one
    """
    if identity.is_active is not True:
        raise Unauthenticated("Account is inactive")
    if policy is Policy.ADMINISTRATOR and identity.is_administrator is not True:
        raise Forbidden("Administrator privileges required")
    return identity
