"""Prometheus metrics for ingestion and classification."""

from prometheus_client import Counter, Histogram

# Ingestion metrics
ingest_requests_total = Counter(
    "ingest_requests_total",
    "Total ingestion requests",
    ["source", "outcome"],
)

ingest_latency_ms = Histogram(
    "ingest_latency_ms",
    "Ingestion latency in milliseconds",
    ["source", "outcome"],
    buckets=[50, 100, 250, 500, 1000, 2000, 5000, 10000, 20000],
)

classification_total = Counter(
    "classification_total",
    "Total classifications by producing path",
    ["source"],
)


class PrometheusIngestMetrics:
    """Prometheus-based ingestion metrics implementation."""

    def record_ingest(self, source: str, outcome: str, latency_ms: float) -> None:
        """Record one ingestion attempt and its latency."""
        ingest_requests_total.labels(source=source, outcome=outcome).inc()
        ingest_latency_ms.labels(source=source, outcome=outcome).observe(latency_ms)

    def inc_classification(self, source: str) -> None:
        """Count a classification by path (llm or heuristic)."""
        classification_total.labels(source=source).inc()
