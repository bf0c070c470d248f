"""Ingestion pipeline: quota → extract → normalize → classify → assemble → save."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

import httpx

from docsense.db.repositories import DocumentRepository
from docsense.errors import DocsenseError, InternalError, QuotaExceeded
from docsense.extractors.http import DEFAULT_TIMEOUT_SECONDS
from docsense.extractors.pdf import extract_pdf
from docsense.extractors.web import extract_url
from docsense.extractors.youtube import extract_youtube
from docsense.ingest.assembler import assemble_document
from docsense.ingest.normalizer import MIN_MEANINGFUL_WORDS, prepare_text
from docsense.llm.client import Classifier
from docsense.models.documents import Document, ExtractionResult, SourceType
from docsense.quota import QuotaTracker
from docsense.utils.logging import StructuredIngestLogger
from docsense.utils.metrics import PrometheusIngestMetrics

logger = logging.getLogger(__name__)

# Web sources have their own emptiness gates in the extractors
MIN_WORDS_BY_SOURCE = {
    SourceType.pdf: MIN_MEANINGFUL_WORDS,
    SourceType.url: 1,
    SourceType.youtube: 1,
}


class IngestionPipeline:
    """Turns a submitted source into a persisted, classified Document."""

    def __init__(
        self,
        *,
        quota: QuotaTracker,
        classifier: Classifier,
        documents: DocumentRepository,
        http_client: httpx.AsyncClient | None = None,
        fetch_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        metrics: PrometheusIngestMetrics | None = None,
        run_logger: StructuredIngestLogger | None = None,
    ) -> None:
        """Initialize pipeline.

        Args:
            quota: Daily quota tracker
            classifier: LLM or heuristic classifier
            documents: Document repository
            http_client: Shared httpx client (None for one client per fetch)
            fetch_timeout: URL/YouTube fetch timeout in seconds
            metrics: Prometheus metrics recorder
            run_logger: Structured run logger
        """
        self._quota = quota
        self._classifier = classifier
        self._documents = documents
        self._http_client = http_client
        self._fetch_timeout = fetch_timeout
        self._metrics = metrics or PrometheusIngestMetrics()
        self._run_logger = run_logger or StructuredIngestLogger()

    async def ingest_pdf(
        self,
        user_id: str,
        payload: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> Document:
        """Ingest an uploaded PDF."""

        async def extract() -> ExtractionResult:
            return await asyncio.to_thread(extract_pdf, payload, filename, content_type)

        return await self._run(user_id, SourceType.pdf, extract)

    async def ingest_url(self, user_id: str, url: str) -> Document:
        """Ingest a web page."""

        async def extract() -> ExtractionResult:
            return await extract_url(url, client=self._http_client, timeout=self._fetch_timeout)

        return await self._run(user_id, SourceType.url, extract)

    async def ingest_youtube(self, user_id: str, url: str) -> Document:
        """Ingest a YouTube video's metadata."""

        async def extract() -> ExtractionResult:
            return await extract_youtube(
                url, client=self._http_client, timeout=self._fetch_timeout
            )

        return await self._run(user_id, SourceType.youtube, extract)

    async def _run(
        self,
        user_id: str,
        source_type: SourceType,
        extract: Callable[[], Awaitable[ExtractionResult]],
    ) -> Document:
        """Run one ingestion cycle and charge quota only on success."""
        start = time.perf_counter()
        source = source_type.value

        try:
            if not await self._quota.can_make_request(user_id):
                raise QuotaExceeded(
                    f"Daily limit of {self._quota.max_requests} requests reached.",
                    suggestion="Your quota resets at midnight.",
                )

            extraction = await extract()
            prepared = prepare_text(
                extraction.raw_text, min_meaningful_words=MIN_WORDS_BY_SOURCE[source_type]
            )
            logger.debug(
                f"Prepared {len(prepared.text)} chars ({prepared.meaningful_words} meaningful "
                f"words, truncated={prepared.truncated}) for {extraction.title!r}"
            )

            classification = await self._classifier.classify(
                prepared.text, extraction.title, source
            )
            self._metrics.inc_classification(classification.source)

            document = assemble_document(
                extraction=extraction,
                content=prepared.text,
                classification=classification,
                source_type=source_type,
                owner_id=user_id,
            )
            await self._documents.save_document(document)
            await self._quota.increment(user_id)

        except DocsenseError as e:
            self._record(source, user_id, e.kind, start, error_kind=e.kind)
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during {source} ingestion")
            self._record(source, user_id, "internal_error", start, error_kind="internal_error")
            raise InternalError(
                f"An unexpected error occurred while processing the {source} source."
            ) from e

        self._record(
            source,
            user_id,
            "success",
            start,
            document_id=document.id,
            classification_source=classification.source,
        )
        return document

    def _record(
        self,
        source: str,
        user_id: str,
        outcome: str,
        start: float,
        **fields: str,
    ) -> None:
        latency_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_ingest(source, outcome, latency_ms)
        self._run_logger.log_run(
            source=source, user_id=user_id, outcome=outcome, latency_ms=latency_ms, **fields
        )
