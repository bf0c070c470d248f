"""SQL implementations of repository interfaces."""

from datetime import date, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docsense.db.models import DailyUsage as DailyUsageDB
from docsense.db.models import Document as DocumentDB
from docsense.db.models import User as UserDB
from docsense.db.repositories import UserRecord
from docsense.errors import DuplicateAccount
from docsense.models.documents import Document, SourceType


def _user_record(user: UserDB) -> UserRecord:
    return UserRecord(
        id=user.user_id,
        email=user.email,
        name=user.name,
        password_hash=user.password_hash,
        is_active=user.is_active,
        created_at=user.created_at,
        last_login=user.last_login,
        email_verified=user.email_verified,
    )


def _document(row: DocumentDB) -> Document:
    return Document(
        id=row.document_id,
        title=row.title,
        summary=row.summary,
        category=row.category,
        department=row.department,
        upload_date=row.upload_date,
        type=SourceType(row.source_type),
        original_url=row.original_url,
        content=row.content,
        owner_id=row.owner_id,
    )


class SqlUserRepository:
    """SQL implementation of UserRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_user(self, record: UserRecord) -> UserRecord:
        """Insert a new user."""
        async with self._session_factory() as session:
            session.add(
                UserDB(
                    user_id=record.id,
                    email=record.email,
                    name=record.name,
                    password_hash=record.password_hash,
                    is_active=record.is_active,
                    created_at=record.created_at,
                    last_login=record.last_login,
                    email_verified=record.email_verified,
                )
            )
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateAccount("An account with this email already exists") from e

        return record

    async def get_user_by_id(self, user_id: str) -> UserRecord | None:
        """Get user by id."""
        async with self._session_factory() as session:
            user = await session.get(UserDB, user_id)
            return _user_record(user) if user else None

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        async with self._session_factory() as session:
            result = await session.execute(select(UserDB).where(UserDB.email == email.lower()))
            user = result.scalar_one_or_none()
            return _user_record(user) if user else None

    async def update_user(self, user_id: str, **fields: object) -> UserRecord | None:
        """Update columns of a user."""
        async with self._session_factory() as session:
            user = await session.get(UserDB, user_id)
            if user is None:
                return None

            for name, value in fields.items():
                setattr(user, name, value)

            await session.commit()
            return _user_record(user)

    async def list_users(self, *, limit: int = 50, skip: int = 0) -> list[UserRecord]:
        """List active users, newest first."""
        query = (
            select(UserDB)
            .where(UserDB.is_active.is_(True))
            .order_by(UserDB.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return [_user_record(u) for u in result.scalars().all()]

    async def count_users(
        self, *, active_only: bool = False, created_since: datetime | None = None
    ) -> int:
        """Count users matching the filters."""
        query = select(func.count()).select_from(UserDB)
        if active_only:
            query = query.where(UserDB.is_active.is_(True))
        if created_since is not None:
            query = query.where(UserDB.created_at >= created_since)

        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one())


class SqlDocumentRepository:
    """SQL implementation of DocumentRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save_document(self, document: Document) -> None:
        """Persist a document."""
        async with self._session_factory() as session:
            session.add(
                DocumentDB(
                    document_id=document.id,
                    owner_id=document.owner_id,
                    title=document.title,
                    summary=document.summary,
                    category=document.category,
                    department=document.department,
                    upload_date=document.upload_date,
                    source_type=document.type.value,
                    original_url=document.original_url,
                    content=document.content,
                )
            )
            await session.commit()

    async def list_documents(
        self,
        owner_id: str,
        *,
        category: str | None = None,
        department: str | None = None,
        source_type: SourceType | None = None,
    ) -> list[Document]:
        """List an owner's documents, newest first."""
        # Build query with ownership
        query = select(DocumentDB).where(DocumentDB.owner_id == owner_id)

        if category:
            query = query.where(DocumentDB.category == category)
        if department:
            query = query.where(DocumentDB.department == department)
        if source_type:
            query = query.where(DocumentDB.source_type == source_type.value)

        query = query.order_by(DocumentDB.upload_date.desc())

        async with self._session_factory() as session:
            result = await session.execute(query)
            return [_document(row) for row in result.scalars().all()]

    async def get_document(self, document_id: str, owner_id: str) -> Document | None:
        """Get a document by id."""
        query = select(DocumentDB).where(
            DocumentDB.document_id == document_id,
            DocumentDB.owner_id == owner_id,
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            row = result.scalar_one_or_none()
            return _document(row) if row else None

    async def delete_document(self, document_id: str, owner_id: str) -> bool:
        """Delete a document."""
        stmt = delete(DocumentDB).where(
            DocumentDB.document_id == document_id,
            DocumentDB.owner_id == owner_id,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            return (result.rowcount or 0) > 0


class SqlUsageStore:
    """SQL implementation of UsageStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def ensure_usage(self, user_id: str, day: date, max_requests: int) -> int:
        """Create the counter at zero if missing."""
        async with self._session_factory() as session:
            row = await session.get(DailyUsageDB, (user_id, day))
            if row is not None:
                return row.requests

            session.add(
                DailyUsageDB(user_id=user_id, day=day, requests=0, max_requests=max_requests)
            )
            try:
                await session.commit()
            except IntegrityError:
                # Created concurrently by another request
                await session.rollback()
                row = await session.get(DailyUsageDB, (user_id, day))
                return row.requests if row else 0

            return 0

    async def increment_usage(self, user_id: str, day: date) -> int:
        """Atomically add one request."""
        stmt = (
            update(DailyUsageDB)
            .where(DailyUsageDB.user_id == user_id, DailyUsageDB.day == day)
            .values(requests=DailyUsageDB.requests + 1)
        )
        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()

            result = await session.execute(
                select(DailyUsageDB.requests).where(
                    DailyUsageDB.user_id == user_id, DailyUsageDB.day == day
                )
            )
            return int(result.scalar_one_or_none() or 0)
