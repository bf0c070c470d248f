"""In-memory implementations of repository interfaces."""

from dataclasses import replace
from datetime import date, datetime

from docsense.db.repositories import UserRecord
from docsense.errors import DuplicateAccount
from docsense.models.documents import Document, SourceType


class InMemoryUserRepository:
    """In-memory implementation of UserRepository."""

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}

    async def create_user(self, record: UserRecord) -> UserRecord:
        """Insert a new user."""
        if await self.get_user_by_email(record.email) is not None:
            raise DuplicateAccount("An account with this email already exists")
        self._users[record.id] = record
        return record

    async def get_user_by_id(self, user_id: str) -> UserRecord | None:
        """Get user by id."""
        return self._users.get(user_id)

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        wanted = email.lower()
        for user in self._users.values():
            if user.email == wanted:
                return user
        return None

    async def update_user(self, user_id: str, **fields: object) -> UserRecord | None:
        """Update columns of a user."""
        record = self._users.get(user_id)
        if record is None:
            return None

        updated = replace(record, **fields)  # type: ignore[arg-type]
        self._users[user_id] = updated
        return updated

    async def list_users(self, *, limit: int = 50, skip: int = 0) -> list[UserRecord]:
        """List active users, newest first."""
        active = [u for u in self._users.values() if u.is_active]
        active.sort(key=lambda u: u.created_at, reverse=True)
        return active[skip : skip + limit]

    async def count_users(
        self, *, active_only: bool = False, created_since: datetime | None = None
    ) -> int:
        """Count users matching the filters."""
        count = 0
        for user in self._users.values():
            if active_only and not user.is_active:
                continue
            if created_since is not None and user.created_at < created_since:
                continue
            count += 1
        return count


class InMemoryDocumentRepository:
    """In-memory implementation of DocumentRepository."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    async def save_document(self, document: Document) -> None:
        """Persist a document."""
        self._documents[document.id] = document

    async def list_documents(
        self,
        owner_id: str,
        *,
        category: str | None = None,
        department: str | None = None,
        source_type: SourceType | None = None,
    ) -> list[Document]:
        """List an owner's documents, newest first."""
        results = [
            doc
            for doc in self._documents.values()
            if doc.owner_id == owner_id
            and (category is None or doc.category == category)
            and (department is None or doc.department == department)
            and (source_type is None or doc.type == source_type)
        ]
        results.sort(key=lambda d: d.upload_date, reverse=True)
        return results

    async def get_document(self, document_id: str, owner_id: str) -> Document | None:
        """Get a document by id."""
        doc = self._documents.get(document_id)

        # Enforce ownership
        if doc is None or doc.owner_id != owner_id:
            return None

        return doc

    async def delete_document(self, document_id: str, owner_id: str) -> bool:
        """Delete a document."""
        if await self.get_document(document_id, owner_id) is None:
            return False
        del self._documents[document_id]
        return True


class InMemoryUsageStore:
    """In-memory implementation of UsageStore keyed by (user, day)."""

    def __init__(self) -> None:
        self._counts: dict[tuple[str, date], int] = {}

    async def ensure_usage(self, user_id: str, day: date, max_requests: int) -> int:
        """Create the counter at zero if missing."""
        return self._counts.setdefault((user_id, day), 0)

    async def increment_usage(self, user_id: str, day: date) -> int:
        """Add one request."""
        key = (user_id, day)
        self._counts[key] = self._counts.get(key, 0) + 1
        return self._counts[key]
