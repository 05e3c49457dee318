"""Prometheus metrics for contract health, portfolio risk and HTTP performance"""

from prometheus_client import Counter, Histogram, Gauge
from amc_portal.domain.models import ClientHealth, PortfolioSummary

# Assessment metrics (GET /v1/clients/{id}/health only)
health_assessment_counter = Counter(
    "amc_health_assessments_total",
    "Single-client health assessments served",
    ["outcome"],  # at_risk | healthy
)

risk_signal_counter = Counter(
    "amc_risk_signals_total",
    "Risk signals raised by single-client health assessments",
    ["signal"],  # expiring_soon | low_hours
)

skipped_client_counter = Counter(
    "amc_skipped_clients_total",
    "Clients left out of portfolio roll-ups because their records failed validation",
)

# Portfolio metrics
portfolio_computation_counter = Counter(
    "amc_portfolio_computations_total",
    "Portfolio-wide assessments computed",
    ["endpoint"],  # summary | at_risk
)

at_risk_clients_gauge = Gauge(
    "amc_at_risk_clients",
    "At-risk clients in the most recent portfolio computation",
)

# Workflow metrics
status_transition_counter = Counter(
    "amc_status_transitions_total",
    "Accepted status changes",
    ["entity", "status"],  # work_log | hour_request
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(health: ClientHealth) -> None:
    """Record assessment outcome and which signals fired"""
    outcome = "at_risk" if health.risk.is_at_risk else "healthy"
    health_assessment_counter.labels(outcome=outcome).inc()

    if health.risk.is_expiring_soon:
        risk_signal_counter.labels(signal="expiring_soon").inc()
    if health.risk.is_low_hours:
        risk_signal_counter.labels(signal="low_hours").inc()


def record_portfolio(summary: PortfolioSummary, endpoint: str) -> None:
    """Count one portfolio computation and publish its at-risk total"""
    portfolio_computation_counter.labels(endpoint=endpoint).inc()
    at_risk_clients_gauge.set(summary.at_risk_clients)
