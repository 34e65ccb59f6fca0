"""
verify.py
---------
Purpose:
    Verify Supabase Auth access tokens (ES256) against the project JWKS.

Notes:
    - Keys are fetched lazily and cached by PyJWKClient.
    - `auth_dependency` returns the decoded claims for protected routes.
    - `current_user_id` narrows the claims to the caller's user id.
"""

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from aggie_nexus.config import settings
from aggie_nexus.errors import AuthenticationError, DependencyError
from aggie_nexus.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_jwk_client = PyJWKClient(settings.jwks_url())
# auto_error=False: a missing header must surface as 401, not HTTPBearer's 403
_security = HTTPBearer(auto_error=False)


def verify_jwt(token: str) -> dict:
    try:
        signing_key = _jwk_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience=settings.SUPABASE_JWT_AUDIENCE,
            options={"verify_exp": True},
        )
    except jwt.PyJWKClientConnectionError as e:
        logger.error("Could not fetch signing keys", error=str(e))
        raise DependencyError("Authentication provider unavailable") from e
    except jwt.PyJWTError as e:
        logger.warning("Rejected access token", error=str(e))
        raise AuthenticationError(f"Invalid authentication token: {e}") from e


def auth_dependency(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
) -> dict:
    if credentials is None:
        raise AuthenticationError("Authentication required")
    return verify_jwt(credentials.credentials)


def current_user_id(claims: dict = Depends(auth_dependency)) -> str:
    user_id = claims.get("sub")
    if not user_id:
        logger.error("No user ID in JWT claims")
        raise AuthenticationError("Invalid token: missing user ID")
    return user_id


def optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
) -> str | None:
    """Caller's user id when a valid token is sent, None for anonymous requests."""
    if credentials is None:
        return None
    return verify_jwt(credentials.credentials).get("sub")
