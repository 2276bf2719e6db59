"""Tests for Prometheus metrics."""

from __future__ import annotations

from efs_request_operator.metrics import (
    api_call_duration_seconds,
    api_call_total,
    error_total,
    phase_transitions_total,
    reconcile_duration_seconds,
    reconcile_total,
    status_patch_total,
    tracked_requests,
)


class TestMetricsExist:
    """Test that all expected metrics are defined."""

    def test_reconcile_total_exists(self):
        """Test reconcile_total counter exists."""
        # Prometheus counters don't include "_total" in their _name attribute
        assert reconcile_total._name == "efs_request_operator_reconcile"

    def test_reconcile_duration_exists(self):
        """Test reconcile_duration_seconds histogram exists."""
        assert reconcile_duration_seconds._name == "efs_request_operator_reconcile_duration_seconds"

    def test_error_total_exists(self):
        """Test error_total counter exists."""
        assert error_total._name == "efs_request_operator_error"

    def test_phase_transitions_exists(self):
        """Test phase_transitions_total counter exists."""
        assert phase_transitions_total._name == "efs_request_operator_phase_transitions"

    def test_status_patch_total_exists(self):
        """Test status_patch_total counter exists."""
        assert status_patch_total._name == "efs_request_operator_status_patch"

    def test_api_call_metrics_exist(self):
        """Test API call metrics exist."""
        assert api_call_total._name == "efs_request_operator_api_call"
        assert api_call_duration_seconds._name == "efs_request_operator_api_call_duration_seconds"

    def test_tracked_requests_exists(self):
        """Test tracked_requests gauge exists."""
        assert tracked_requests._name == "efs_request_operator_tracked_requests"


class TestMetricsLabels:
    """Test that metrics accept their labels."""

    def test_reconcile_total_labels(self):
        """Test reconcile_total labels."""
        before = reconcile_total.labels(kind="EfsRequest", result="success")._value.get()
        reconcile_total.labels(kind="EfsRequest", result="success").inc()
        after = reconcile_total.labels(kind="EfsRequest", result="success")._value.get()
        assert after == before + 1

    def test_phase_transitions_labels(self):
        """Test phase_transitions_total labels."""
        phase_transitions_total.labels(from_phase="Initialised", to_phase="CreatingFileSystem").inc()
