"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from docsense.models.documents import Document, SourceType
from docsense.models.users import UserResponse


@dataclass
class UserRecord:
    """Stored user account, including the password hash."""

    id: str
    email: str
    name: str
    password_hash: str
    is_active: bool
    created_at: datetime
    last_login: datetime | None
    email_verified: bool

    def to_response(self) -> UserResponse:
        """Public view without the hash."""
        return UserResponse(
            id=self.id,
            email=self.email,
            name=self.name,
            is_active=self.is_active,
            created_at=self.created_at,
            last_login=self.last_login,
            email_verified=self.email_verified,
        )


class UserRepository(Protocol):
    """Repository for user accounts."""

    async def create_user(self, record: UserRecord) -> UserRecord:
        """Insert a new user.

        Raises:
            DuplicateAccount: If the email is already taken
        """
        ...

    async def get_user_by_id(self, user_id: str) -> UserRecord | None:
        """Get user by id (active or not)."""
        ...

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by lowercased email (active or not)."""
        ...

    async def update_user(self, user_id: str, **fields: object) -> UserRecord | None:
        """Update columns of a user.

        Returns:
            Updated record or None if not found
        """
        ...

    async def list_users(self, *, limit: int = 50, skip: int = 0) -> list[UserRecord]:
        """List active users, newest first."""
        ...

    async def count_users(
        self, *, active_only: bool = False, created_since: datetime | None = None
    ) -> int:
        """Count users matching the filters."""
        ...


class DocumentRepository(Protocol):
    """Repository for ingested documents (partitioned by owner)."""

    async def save_document(self, document: Document) -> None:
        """Persist a document."""
        ...

    async def list_documents(
        self,
        owner_id: str,
        *,
        category: str | None = None,
        department: str | None = None,
        source_type: SourceType | None = None,
    ) -> list[Document]:
        """List an owner's documents, newest first."""
        ...

    async def get_document(self, document_id: str, owner_id: str) -> Document | None:
        """Get a document by id within the owner's partition."""
        ...

    async def delete_document(self, document_id: str, owner_id: str) -> bool:
        """Delete a document.

        Returns:
            True if a document was removed
        """
        ...


class UsageStore(Protocol):
    """Store for per-user, per-day request counters."""

    async def ensure_usage(self, user_id: str, day: date, max_requests: int) -> int:
        """Create the (user, day) counter at zero if missing.

        Returns:
            Current request count
        """
        ...

    async def increment_usage(self, user_id: str, day: date) -> int:
        """Atomically add one request.

        Returns:
            New request count
        """
        ...
