"""
Request dependencies: current user from the bearer token, role gates and
warehouse scope gates.

Tokens are issued elsewhere; this service only verifies them.
"""
from typing import Callable, List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from farmledger.core.access import ensure_warehouse_access
from farmledger.core.exceptions import PermissionDeniedException, UnauthorizedException
from farmledger.database import get_db
from farmledger.models.user import User
from farmledger.repositories.farm_repository import UserRepository
from farmledger.utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException()

    subject = decode_access_token(credentials.credentials)
    if subject is None:
        raise UnauthorizedException("Invalid or expired token")
    try:
        user_id = int(subject)
    except ValueError:
        raise UnauthorizedException("Invalid token subject")

    user = UserRepository(db).get_by_id(user_id)
    if user is None or not user.is_active:
        raise UnauthorizedException()
    return user


def require_roles(roles: List[str]) -> Callable[..., User]:
    """Dependency factory: the current user must hold one of ``roles``."""
    allowed = set(roles)

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise PermissionDeniedException()
        return current_user

    return _checker


def require_warehouse_access(write: bool = False) -> Callable[..., User]:
    """Dependency factory for routes that carry ``warehouse_id`` in the path or query."""

    def _checker(
        warehouse_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        ensure_warehouse_access(db, current_user, warehouse_id, write=write)
        return current_user

    return _checker
