# theatre/utils/auth_utils.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from theatre import config
from theatre.models.user import TokenData, User, UserRole


class AuthError(Exception):
    """Credentials or session are not valid."""


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Generate JWT access token."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": user_id, "jti": str(uuid.uuid4()), "exp": expire}
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> TokenData:
    """Raises JWTError for a malformed, forged or expired token."""
    payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    user_id = payload.get("sub")
    if user_id is None:
        raise JWTError("Token has no subject")
    exp = payload.get("exp")
    expires_at = datetime.fromtimestamp(exp, timezone.utc) if exp is not None else None
    return TokenData(user_id=user_id, jti=payload.get("jti", ""), expires_at=expires_at)


def get_bearer_token(request: Request) -> str:
    """Extract JWT token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_header.split(" ", 1)[1]


async def get_current_user(request: Request, token: str = Depends(get_bearer_token)) -> User:
    """Resolve the bearer token to an active user profile."""
    auth = request.app.state.theatre.auth
    try:
        return await auth.resolve(token)
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )


def admin_required(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Only admins can perform this action")
    return user
