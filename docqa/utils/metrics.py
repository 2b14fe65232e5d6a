"""Prometheus metrics for the analysis pipeline."""

from prometheus_client import Counter, Histogram

# Synthesis metrics
synthesis_latency_ms = Histogram(
    "synthesis_latency_ms",
    "Reasoning service latency in milliseconds",
    ["outcome"],
    buckets=[100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000],
)

synthesis_outcomes_total = Counter(
    "synthesis_outcomes_total",
    "Total synthesis attempts by outcome",
    ["outcome"],
)

exchange_persist_errors_total = Counter(
    "exchange_persist_errors_total",
    "Total exchange persistence failures",
)


class PrometheusSynthesisMetrics:
    """Prometheus-based synthesis metrics implementation."""

    def record_attempt(self, outcome: str, latency_ms: float) -> None:
        """Record one synthesis attempt."""
        synthesis_latency_ms.labels(outcome=outcome).observe(latency_ms)
        synthesis_outcomes_total.labels(outcome=outcome).inc()

    def inc_persist_error(self) -> None:
        """Increment exchange persistence error counter."""
        exchange_persist_errors_total.inc()
