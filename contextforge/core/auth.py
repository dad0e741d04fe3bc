"""Authentication dependency: resolves the acting user for every folder request.

Public interface:
    ``require_auth`` -- returns AuthContext or raises 401.

When ``settings.auth_enabled`` is False every request acts as the anonymous
owner, so the development workflow needs no tokens. All folder data is
scoped to ``AuthContext.user_id``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .token_factory import decode_token
from ..database import get_db
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)

ANONYMOUS_USER_ID = "anonymous"


@dataclass(frozen=True)
class AuthContext:
    """Identity of the acting user."""

    user_id: str
    role: str = "user"


_ANONYMOUS = AuthContext(user_id=ANONYMOUS_USER_ID)


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Require a valid bearer token and return the user's AuthContext.

    When ``AUTH_ENABLED=false`` returns the anonymous context.
    """
    if not settings.auth_enabled:
        return _ANONYMOUS

    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = decode_token(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm
    )
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    from ..models.user import User

    user = db.query(User).filter(User.user_id == payload.sub).first()
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    return AuthContext(user_id=user.user_id, role=payload.role)
