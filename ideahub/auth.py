"""Access token handling. Sessions themselves are issued by the identity provider."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from .config import ALGORITHM, SECRET_KEY
from .schemas import UserAuth

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"

# Security
security = HTTPBearer(auto_error=False)


def create_access_token(claims: Dict[str, Any], expires_in_minutes: int = 60) -> str:
    """Create a signed token; ``claims`` must carry ``sub`` (the user id)."""
    to_encode = dict(claims)
    to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expires_in_minutes)
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> UserAuth:
    """Decode and validate a token. Raises JWTError when invalid."""
    payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], options={"verify_aud": False})
    user_id = payload.get("sub") or payload.get("user_id")
    if not user_id:
        raise JWTError("Token has no subject")
    metadata = payload.get("user_metadata") or {}
    if not isinstance(metadata, dict):
        raise JWTError("Token user_metadata is not an object")
    try:
        return UserAuth(
            user_id=user_id,
            email=payload.get("email"),
            name=payload.get("name") or metadata.get("full_name"),
            roles=payload.get("roles", []),
            access_token=token
        )
    except ValidationError as e:
        raise JWTError(f"Token claims are malformed: {e}") from e


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> UserAuth:
    """Resolve the caller from a bearer header or the access token cookie."""
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    try:
        return decode_access_token(token)
    except JWTError as e:
        logger.error(f"JWT validation error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )
