"""Prometheus metrics for the EFS Request Operator."""

from prometheus_client import Counter, Gauge, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "efs_request_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "efs_request_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

error_total = Counter(
    "efs_request_operator_error_total",
    "Total number of reconciliation processing errors",
    ["kind", "error_type"],
)

# Status metrics
phase_transitions_total = Counter(
    "efs_request_operator_phase_transitions_total",
    "Total number of status phase transitions",
    ["from_phase", "to_phase"],
)

status_patch_total = Counter(
    "efs_request_operator_status_patch_total",
    "Total number of status patch decisions",
    ["result"],
)

# API call metrics
api_call_total = Counter(
    "efs_request_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "efs_request_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Scheduler metrics
tracked_requests = Gauge(
    "efs_request_operator_tracked_requests",
    "Number of request keys currently scheduled by the driver",
)
