# theatre/services/auth.py
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from jose import JWTError

from theatre import config
from theatre.database import USERS, Store, utc_now
from theatre.models.activity import ActivityType
from theatre.models.user import ProfileUpdate, Token, User, UserCreate, UserRole
from theatre.services.activity import ActivityLog
from theatre.utils.auth_utils import (
    AuthError,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    """
    Accounts and sessions.

    Sessions are JWT bearer tokens; signing out revokes the token id in
    process memory. Deleting an account only flips ``is_active``, so bookings
    and activity keep their owner.
    """

    def __init__(self, store: Store, activity: ActivityLog):
        self.store = store
        self.activity = activity
        # jti -> token expiry, pruned once expired
        self._revoked: Dict[str, datetime] = {}

    async def get_user(self, user_id: str) -> Optional[User]:
        row = await self.store.select_one(USERS, {"id": user_id})
        return User.model_validate(row) if row else None

    async def sign_up(self, new_user: UserCreate, role: UserRole = UserRole.USER) -> User:
        if await self.store.select_one(USERS, {"email": new_user.email}):
            raise AuthError("Email already registered.")

        row = await self.store.insert(USERS, {
            "name": new_user.name,
            "email": new_user.email,
            "password": get_password_hash(new_user.password),
            "role": UserRole(role).value,
            "is_active": True,
            "last_login": None,
        })
        user = User.model_validate(row)
        logger.info("Registered %s account", user.role.value, extra={"user_id": user.id})
        await self.activity.log(user.id, ActivityType.REGISTRATION, "User registered")
        return user

    async def sign_in(self, email: str, password: str) -> Token:
        row = await self.store.select_one(USERS, {"email": email.strip().lower()})
        if not row or not verify_password(password, row["password"]):
            raise AuthError("Invalid credentials")
        if not row.get("is_active", True):
            raise AuthError("Account is deactivated")

        await self.store.update(USERS, {"id": row["id"]}, {"last_login": utc_now()})
        await self.activity.log(row["id"], ActivityType.LOGIN, "User logged in")
        return Token(access_token=create_access_token(row["id"]))

    async def resolve(self, token: str) -> User:
        """Hydrate the profile of the user a token belongs to."""
        try:
            token_data = decode_access_token(token)
        except JWTError:
            raise AuthError("Invalid credentials")
        if token_data.jti in self._revoked:
            raise AuthError("Session has ended")

        user = await self.get_user(token_data.user_id)
        if user is None:
            raise AuthError("User not found")
        if not user.is_active:
            raise AuthError("Account is deactivated")
        return user

    async def sign_out(self, user: User, token: str) -> None:
        await self.activity.log(user.id, ActivityType.LOGOUT, "User logged out")
        try:
            token_data = decode_access_token(token)
        except JWTError:
            logger.warning("Sign-out with an undecodable token", extra={"user_id": user.id})
            return
        self._prune_revoked()
        self._revoked[token_data.jti] = token_data.expires_at or (
            utc_now() + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
        )

    def _prune_revoked(self) -> None:
        now = utc_now()
        for jti, expires_at in list(self._revoked.items()):
            if expires_at <= now:
                del self._revoked[jti]

    async def update_profile(self, user: User, changes: ProfileUpdate) -> User:
        values = changes.model_dump(exclude_none=True)
        if values:
            await self.store.update(USERS, {"id": user.id}, values)
            await self.activity.log(user.id, ActivityType.PROFILE_UPDATE, "Profile updated", {"fields": sorted(values)})
        return await self.get_user(user.id)

    async def deactivate(self, user_id: str, description: str = "User deleted their account",
                         activity_type: ActivityType = ActivityType.ACCOUNT_DELETION) -> bool:
        """Soft-delete an account; returns False if no such user exists."""
        matched = await self.store.update(USERS, {"id": user_id}, {"is_active": False})
        if matched:
            logger.info("Deactivated account", extra={"user_id": user_id})
            await self.activity.log(user_id, activity_type, description)
        return bool(matched)
