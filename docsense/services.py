"""Service container - explicitly constructed collaborators for the app.

The process entry point builds one container (``build_services``) and owns
its lifecycle; request handlers reach it through ``app.state``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import httpx
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine

from docsense.auth.passwords import PasswordHasher, get_password_hasher
from docsense.auth.service import AccountService
from docsense.auth.tokens import TokenService
from docsense.config import Settings
from docsense.db.engine import create_all, create_async_engine_from_settings, create_session_factory
from docsense.db.inmemory import (
    InMemoryDocumentRepository,
    InMemoryUsageStore,
    InMemoryUserRepository,
)
from docsense.db.redis_usage import RedisUsageStore
from docsense.db.repositories import DocumentRepository, UsageStore, UserRepository
from docsense.db.sql_repositories import SqlDocumentRepository, SqlUsageStore, SqlUserRepository
from docsense.ingest.pipeline import IngestionPipeline
from docsense.llm.client import Classifier, get_classifier
from docsense.quota import QuotaTracker

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything a request handler needs."""

    settings: Settings
    accounts: AccountService
    tokens: TokenService
    quota: QuotaTracker
    documents: DocumentRepository
    classifier: Classifier
    pipeline: IngestionPipeline
    engine: AsyncEngine | None = None
    redis: Redis | None = None
    http_client: httpx.AsyncClient | None = None

    async def aclose(self) -> None:
        """Release connections owned by the container."""
        if self.http_client is not None:
            await self.http_client.aclose()
        if self.redis is not None:
            await self.redis.aclose()
        if self.engine is not None:
            await self.engine.dispose()


def assemble_services(
    settings: Settings,
    *,
    users: UserRepository,
    documents: DocumentRepository,
    usage: UsageStore,
    classifier: Classifier,
    hasher: PasswordHasher,
    http_client: httpx.AsyncClient | None = None,
    today: Callable[[], date] = date.today,
    engine: AsyncEngine | None = None,
    redis: Redis | None = None,
) -> Services:
    """Wire repositories and capabilities into a Services container."""
    quota = QuotaTracker(usage, max_requests=settings.daily_request_limit, today=today)
    pipeline = IngestionPipeline(
        quota=quota,
        classifier=classifier,
        documents=documents,
        http_client=http_client,
        fetch_timeout=settings.fetch_timeout_seconds,
    )
    return Services(
        settings=settings,
        accounts=AccountService(users, hasher),
        tokens=TokenService(
            settings.jwt_secret.get_secret_value(), expires_days=settings.jwt_expires_days
        ),
        quota=quota,
        documents=documents,
        classifier=classifier,
        pipeline=pipeline,
        engine=engine,
        redis=redis,
        http_client=http_client,
    )


def build_in_memory_services(
    settings: Settings,
    *,
    classifier: Classifier | None = None,
    hasher: PasswordHasher | None = None,
    http_client: httpx.AsyncClient | None = None,
    today: Callable[[], date] = date.today,
) -> Services:
    """Container backed entirely by in-memory stores."""
    return assemble_services(
        settings,
        users=InMemoryUserRepository(),
        documents=InMemoryDocumentRepository(),
        usage=InMemoryUsageStore(),
        classifier=classifier or get_classifier(settings),
        hasher=hasher or get_password_hasher(settings.password_hasher),
        http_client=http_client,
        today=today,
    )


async def build_services(settings: Settings) -> Services:
    """Build the production container from settings.

    Uses SQL repositories when DATABASE_URL is set (in-memory otherwise) and a
    Redis usage store when REDIS_URL is set.
    """
    if not settings.database_url:
        logger.warning("No DATABASE_URL configured, using in-memory stores")
        services = build_in_memory_services(settings)
    else:
        engine = create_async_engine_from_settings(settings)
        await create_all(engine)
        session_factory = create_session_factory(engine)
        services = assemble_services(
            settings,
            users=SqlUserRepository(session_factory),
            documents=SqlDocumentRepository(session_factory),
            usage=SqlUsageStore(session_factory),
            classifier=get_classifier(settings),
            hasher=get_password_hasher(settings.password_hasher),
            engine=engine,
        )

    if settings.redis_url:
        logger.info("Using Redis usage store for quotas")
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        services.redis = redis
        services.quota = QuotaTracker(
            RedisUsageStore(redis, retention_days=settings.usage_retention_days),
            max_requests=settings.daily_request_limit,
        )
        services.pipeline = IngestionPipeline(
            quota=services.quota,
            classifier=services.classifier,
            documents=services.documents,
            fetch_timeout=settings.fetch_timeout_seconds,
        )

    return services
