"""Account service - registration, authentication and account lifecycle."""

import logging
import re
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from docsense.auth.passwords import PasswordHasher
from docsense.db.repositories import UserRecord, UserRepository
from docsense.errors import AuthFailed, DuplicateAccount, InvalidInput
from docsense.models.users import UserResponse, UserStats

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


class AccountService:
    """User accounts backed by a UserRepository.

    Emails are stored lowercased so lookups are case-insensitive. Accounts are
    never removed; ``deactivate_user`` flips ``is_active`` and inactive users
    disappear from lookups and cannot authenticate.
    """

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._clock = clock

    async def register(self, email: str, name: str, password: str) -> UserResponse:
        """Create an account.

        Raises:
            InvalidInput: On a malformed email, short name or short password
            DuplicateAccount: If the email is already registered
        """
        if not email or not name or not password:
            raise InvalidInput("Email, name, and password are required")

        email = email.strip().lower()
        name = name.strip()

        if not EMAIL_PATTERN.match(email):
            raise InvalidInput("Please enter a valid email address")
        if len(name) < MIN_NAME_LENGTH:
            raise InvalidInput(f"Name must be at least {MIN_NAME_LENGTH} characters long")
        validate_password(password)

        if await self._users.get_user_by_email(email) is not None:
            raise DuplicateAccount("An account with this email already exists")

        record = UserRecord(
            id=uuid.uuid4().hex,
            email=email,
            name=name,
            password_hash=self._hasher.hash(password),
            is_active=True,
            created_at=self._clock(),
            last_login=None,
            email_verified=True,  # no email verification flow
        )
        created = await self._users.create_user(record)
        logger.info(f"Registered user {created.id}")
        return created.to_response()

    async def authenticate(self, email: str, password: str) -> UserResponse | None:
        """Check credentials and stamp last_login.

        Returns:
            The user, or None on unknown email, inactive account or bad password
        """
        record = await self._users.get_user_by_email((email or "").strip().lower())
        if record is None or not record.is_active:
            return None

        if not self._hasher.verify(password or "", record.password_hash):
            logger.info(f"Failed login for user {record.id}")
            return None

        updated = await self._users.update_user(record.id, last_login=self._clock())
        return (updated or record).to_response()

    async def get_user_by_id(self, user_id: str) -> UserResponse | None:
        """Get an active user by id."""
        record = await self._users.get_user_by_id(user_id)
        return record.to_response() if record and record.is_active else None

    async def get_user_by_email(self, email: str) -> UserResponse | None:
        """Get an active user by email."""
        record = await self._users.get_user_by_email(email.strip().lower())
        return record.to_response() if record and record.is_active else None

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """Replace the password after checking the current one.

        Raises:
            AuthFailed: If the user is unknown/inactive or the current password is wrong
            InvalidInput: If the new password is too short
        """
        record = await self._users.get_user_by_id(user_id)
        if record is None or not record.is_active:
            raise AuthFailed("User not found")
        if not self._hasher.verify(current_password, record.password_hash):
            raise AuthFailed("Current password is incorrect")

        validate_password(new_password)
        await self._users.update_user(user_id, password_hash=self._hasher.hash(new_password))
        logger.info(f"Password changed for user {user_id}")

    async def deactivate_user(self, user_id: str) -> bool:
        """Soft-delete an account.

        Returns:
            True if an active account was deactivated
        """
        record = await self._users.get_user_by_id(user_id)
        if record is None or not record.is_active:
            return False

        await self._users.update_user(user_id, is_active=False)
        logger.info(f"Deactivated user {user_id}")
        return True

    async def list_users(self, limit: int = 50, skip: int = 0) -> list[UserResponse]:
        """List active users, newest first."""
        records = await self._users.list_users(limit=limit, skip=skip)
        return [r.to_response() for r in records]

    async def get_user_stats(self) -> UserStats:
        """Account counts: total, active, created today and in the last 7 days."""
        now = self._clock()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_ago = today - timedelta(days=7)

        return UserStats(
            total_users=await self._users.count_users(),
            active_users=await self._users.count_users(active_only=True),
            new_users_today=await self._users.count_users(created_since=today),
            new_users_this_week=await self._users.count_users(created_since=week_ago),
        )
