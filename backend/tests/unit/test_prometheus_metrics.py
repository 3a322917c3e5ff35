# backend/tests/unit/test_prometheus_metrics.py
"""Tests for the Prometheus exposition helper."""

from servicebooking.monitoring.prometheus_metrics import PrometheusMetrics, prometheus_metrics


def test_exposition_contains_admission_counter():
    prometheus_metrics.record_admission("admitted")

    payload = prometheus_metrics.get_metrics().decode()

    assert 'servicebooking_booking_admissions_total{outcome="admitted"}' in payload


def test_payload_is_cached_until_invalidated(monkeypatch):
    monkeypatch.setattr(PrometheusMetrics, "_cache_ttl_seconds", 60.0)
    first = prometheus_metrics.get_metrics()
    assert prometheus_metrics.get_metrics() is first

    prometheus_metrics.record_provider_lock("local", "acquired")

    assert PrometheusMetrics._cache_payload is None
    assert b"servicebooking_provider_lock_total" in prometheus_metrics.get_metrics()


def test_content_type():
    assert prometheus_metrics.get_content_type().startswith("text/plain")
