"""
FastAPI Dependencies

Common dependencies for dependency injection.

The resolved account is handed to handlers as an explicit dependency
value; nothing is attached to the request object.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.api.access.rbac import Role, require_role
from accessgate.api.access.resolver import AuthorizationResolver
from accessgate.api.db.models import Account
from accessgate.api.db.session import get_db
from accessgate.api.db.stores import IdentityStore


# Missing credentials are reported by the resolver, not by FastAPI
security = HTTPBearer(auto_error=False)


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Account:
    """
    Get the current authorized account from the bearer token.

    Raises:
        Unauthenticated: If the token is missing, invalid, or its account is gone
        AccessRevoked: If the account's access has been revoked
    """
    credential = credentials.credentials if credentials else None
    resolver = AuthorizationResolver(IdentityStore(db))
    return await resolver.authorize(credential)


def role_required(role: Role):
    """Build a dependency that gates on a role after authorization."""

    async def dependency(
        account: Account = Depends(get_current_account),
    ) -> Account:
        require_role(account, role)
        return account

    dependency.__name__ = f"get_{role.value.lower()}_account"
    return dependency


get_admin_account = role_required(Role.ADMIN)
get_user_account = role_required(Role.USER)
