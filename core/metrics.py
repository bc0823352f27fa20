# core/metrics.py - in-process metrics and audit logging for access control

import logging
import time
import threading
from typing import Dict, Any, Optional, List, Iterable
from dataclasses import dataclass, field
from contextlib import contextmanager

@dataclass
class MetricCounter:
    """A counter metric that can only increase."""
    name: str
    value: int = 0
    labels: Dict[str, str] = field(default_factory=dict)
    last_updated: float = field(default_factory=time.time)

@dataclass
class MetricHistogram:
    """A histogram metric for tracking distributions."""
    name: str
    buckets: List[float] = field(default_factory=lambda: [0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 50.0, 100.0, 250.0, 500.0, 1000.0])
    counts: List[int] = field(default_factory=lambda: [0] * 12)
    sum: float = 0.0
    count: int = 0
    labels: Dict[str, str] = field(default_factory=dict)
    last_updated: float = field(default_factory=time.time)

class MetricsCollector:
    """Thread-safe metrics collector."""

    def __init__(self):
        self._lock = threading.RLock()
        self._counters: Dict[str, MetricCounter] = {}
        self._histograms: Dict[str, MetricHistogram] = {}

    def _get_metric_key(self, name: str, labels: Dict[str, str] = None) -> str:
        """Generate a unique key for a metric with labels."""
        if not labels:
            return name
        sorted_labels = sorted(labels.items())
        label_str = ",".join(f"{k}={v}" for k, v in sorted_labels)
        return f"{name}{{{label_str}}}"

    def increment_counter(self, name: str, value: int = 1, labels: Dict[str, str] = None):
        """Increment a counter metric."""
        with self._lock:
            key = self._get_metric_key(name, labels)
            if key not in self._counters:
                self._counters[key] = MetricCounter(name=name, labels=labels or {})
            self._counters[key].value += value
            self._counters[key].last_updated = time.time()

    def observe_histogram(self, name: str, value: float, labels: Dict[str, str] = None):
        """Observe a value in a histogram metric."""
        with self._lock:
            key = self._get_metric_key(name, labels)
            if key not in self._histograms:
                self._histograms[key] = MetricHistogram(name=name, labels=labels or {})

            histogram = self._histograms[key]
            histogram.sum += value
            histogram.count += 1
            histogram.last_updated = time.time()

            for i, bucket in enumerate(histogram.buckets):
                if value <= bucket:
                    histogram.counts[i] += 1
                    break
            else:
                # Value exceeds all buckets, increment the last one
                histogram.counts[-1] += 1

    def get_counter(self, name: str, labels: Dict[str, str] = None) -> int:
        """Get the current value of a counter."""
        with self._lock:
            key = self._get_metric_key(name, labels)
            counter = self._counters.get(key)
            return counter.value if counter else 0

    def get_histogram_stats(self, name: str, labels: Dict[str, str] = None) -> Dict[str, Any]:
        """Get histogram statistics."""
        with self._lock:
            key = self._get_metric_key(name, labels)
            histogram = self._histograms.get(key, MetricHistogram(name=name, labels=labels or {}))

            return {
                "count": histogram.count,
                "sum": histogram.sum,
                "avg": histogram.sum / histogram.count if histogram.count else 0.0,
                "buckets": dict(zip(histogram.buckets, histogram.counts))
            }

    def counters_by_name(self, prefix: str = "") -> Dict[str, List[Dict[str, Any]]]:
        """Counter values grouped by metric name, one entry per label set."""
        with self._lock:
            grouped: Dict[str, List[Dict[str, Any]]] = {}
            for counter in self._counters.values():
                if counter.name.startswith(prefix):
                    grouped.setdefault(counter.name, []).append({
                        "value": counter.value,
                        "labels": dict(counter.labels),
                    })
            return grouped

    def reset_metrics(self):
        """Reset all metrics."""
        with self._lock:
            self._counters.clear()
            self._histograms.clear()

# Global metrics collector instance
_metrics = MetricsCollector()

audit_logger = logging.getLogger("webac.audit")

# Convenience functions for easy access
def increment_counter(name: str, value: int = 1, labels: Dict[str, str] = None):
    """Increment a counter metric."""
    _metrics.increment_counter(name, value, labels)

def observe_histogram(name: str, value: float, labels: Dict[str, str] = None):
    """Observe a value in a histogram metric."""
    _metrics.observe_histogram(name, value, labels)

def get_counter(name: str, labels: Dict[str, str] = None) -> int:
    """Get the current value of a counter."""
    return _metrics.get_counter(name, labels)

def get_histogram_stats(name: str, labels: Dict[str, str] = None) -> Dict[str, Any]:
    """Get histogram statistics."""
    return _metrics.get_histogram_stats(name, labels)

def reset_metrics():
    """Reset all metrics to zero."""
    _metrics.reset_metrics()

@contextmanager
def time_operation(operation_name: str, labels: Dict[str, str] = None):
    """Context manager recording the duration of a block in milliseconds."""
    start_time = time.time()
    try:
        yield
    finally:
        duration_ms = (time.time() - start_time) * 1000
        observe_histogram(f"{operation_name}.duration_ms", duration_ms, labels)


# ============================================================================
# WebAC Metrics and Auditing
# ============================================================================

def record_webac_resolution(acl_found: bool, principal_count: int = 0, authorization_count: int = 0):
    """
    Record a role resolution.

    Args:
        acl_found: Whether a governing ACL was located
        principal_count: Number of principals in the resulting role map
        authorization_count: Number of authorizations loaded from the ACL
    """
    increment_counter("webac.resolutions")
    if acl_found:
        increment_counter("webac.resolutions.acl_found")
        observe_histogram("webac.resolutions.authorizations", authorization_count)
        observe_histogram("webac.resolutions.principals", principal_count)
    else:
        increment_counter("webac.resolutions.no_acl")


def record_webac_resolution_error(error_type: str):
    """Record a resolution aborted by a store failure."""
    increment_counter("webac.resolutions.errors", labels={"error_type": error_type})


def record_webac_check(allowed: bool, mode: str, route: str = ""):
    """
    Record a mode check made against a resolved role map.

    Args:
        allowed: Whether access was granted
        mode: Mode URI being checked
        route: Route being accessed
    """
    if allowed:
        increment_counter("webac.allowed")
        increment_counter("webac.allowed.by_mode", labels={"mode": mode})
    else:
        increment_counter("webac.denied")
        increment_counter("webac.denied.by_mode", labels={"mode": mode})
        if route:
            increment_counter("webac.denied.by_route", labels={"route": route})


def audit_webac_denial(
    mode: str,
    principals: Iterable[str],
    resource_path: str,
    route: str = "",
    method: str = "unknown",
    metadata: Optional[Dict[str, Any]] = None
):
    """
    Emit audit log entry for a WebAC denial.

    Args:
        mode: Mode URI that was denied
        principals: Principals the caller presented
        resource_path: Store path the check was made against
        route: Route/endpoint being accessed
        method: HTTP method
        metadata: Additional context
    """
    principals = sorted(principals)
    audit_entry = {
        "event": "webac_denial",
        "mode": mode,
        "principals": principals,
        "resource_path": resource_path,
        "route": route,
        "method": method,
        "timestamp": time.time(),
    }

    if metadata:
        audit_entry["metadata"] = metadata

    audit_logger.warning(
        f"WEBAC_DENIAL mode={mode} principals={','.join(principals)} "
        f"resource={resource_path} route={method} {route}",
        extra={"audit": audit_entry}
    )

    increment_counter("webac.audit.denials")
    increment_counter("webac.audit.denials.by_mode", labels={"mode": mode})


def get_webac_metrics() -> Dict[str, Any]:
    """
    Get all WebAC-related metrics grouped by category.

    Returns:
        Dictionary keyed by category (resolutions, allowed, denied, audit, cache)
    """
    webac_metrics: Dict[str, Any] = {}

    for metric_name, entries in _metrics.counters_by_name("webac.").items():
        category = metric_name.split(".")[1]
        webac_metrics.setdefault(category, {})[metric_name] = entries

    return webac_metrics
