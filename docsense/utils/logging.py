"""Logging setup and structured logging for ingestion runs."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def setup_logging(level: str | int = logging.INFO) -> None:
    """Install the process-wide log format. Called once by the entry point."""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


class StructuredIngestLogger:
    """Structured logger for ingestion pipeline runs."""

    def log_run(
        self,
        *,
        source: str,
        user_id: str,
        outcome: str,
        latency_ms: float,
        document_id: str | None = None,
        classification_source: str | None = None,
        error_kind: str | None = None,
    ) -> None:
        """Log one ingestion attempt with structured data."""
        log_data: dict[str, Any] = {
            "source": source,
            "user_id": user_id,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if document_id:
            log_data["document_id"] = document_id
        if classification_source:
            log_data["classification_source"] = classification_source
        if error_kind:
            log_data["error_kind"] = error_kind

        log_msg = f"Ingestion: {source} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        elif outcome == "internal_error":
            logger.error(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
