"""
Defines Prometheus metrics for the extraction engine.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test collection, reloads) must not register a
# collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[no-untyped-def]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing

        try:
            return metric_cls(name, documentation, *args, **kwargs)
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)
Histogram = _duplicate_safe_factory(_OrigHistogram)


def _create_metrics() -> Dict[str, Any]:
    return {
        "documents_extracted": Counter(
            "quarryreader_documents_extracted_total",
            "Total number of documents run through the extraction engine",
        ),
        "extraction_attempts": Counter(
            "quarryreader_extraction_attempts_total",
            "Pipeline runs per relaxation level",
            ["level"],
        ),
        "nodes_removed": Counter(
            "quarryreader_nodes_removed_total",
            "Elements removed by the filtering and cleaning passes",
            ["reason"],
        ),
        "extraction_duration_seconds": Histogram(
            "quarryreader_extraction_duration_seconds",
            "Wall time of a full extraction including relaxations",
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
