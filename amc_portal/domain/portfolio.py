"""Per-client health assessment and portfolio roll-up - main entry points of the engine"""

from datetime import date
from typing import Iterable, List
from amc_portal.domain.models import (
    Client,
    ClientHealth,
    HealthPolicy,
    PaymentRecord,
    PortfolioSummary,
    WorkLogEntry,
)
from amc_portal.domain.allocation import allocate, resolve_annual_hours
from amc_portal.domain.utilization import compute_utilization
from amc_portal.domain.financials import compute_financials
from amc_portal.domain.risk import classify_risk
from amc_portal.utils.date_utils import earliest, latest


def assess_client(
    client: Client,
    work_logs: Iterable[WorkLogEntry],
    payments: Iterable[PaymentRecord],
    as_of: date,
    policy: HealthPolicy = HealthPolicy(),
) -> ClientHealth:
    """
    Derive allocation, utilization, financials and risk for one client.

    Inputs must come from one consistent snapshot and be scoped to the client.

    Raises:
        InvalidAllocationInput: Negative annual hours on the client
        UnrecognizedPaymentTerm: Unknown payment term and the policy does not
            allow the monthly fallback
    """
    hours_assigned_year = resolve_annual_hours(
        client.hours_assigned_year, policy.default_hours_assigned_year
    )
    allocation = allocate(
        hours_assigned_year,
        client.payment_term,
        allow_unknown_term=policy.allow_unknown_payment_term,
    )
    utilization = compute_utilization(work_logs, allocation)
    financials = compute_financials(payments, client.cost_for_year)
    risk = classify_risk(
        client,
        utilization,
        as_of,
        expiry_window_days=policy.expiry_window_days,
        low_hours_threshold=policy.low_hours_threshold,
    )

    return ClientHealth(
        client=client,
        allocation=allocation,
        utilization=utilization,
        financials=financials,
        risk=risk,
    )


def aggregate(per_client: Iterable[ClientHealth]) -> PortfolioSummary:
    """
    Roll per-client results up into dashboard totals.

    Remaining hours are summed client by client rather than recomputed from
    the totals, so any per-client adjustment made upstream is preserved.
    """
    healths = list(per_client)

    return PortfolioSummary(
        total_paid=sum(h.financials.amount_paid for h in healths),
        total_consumed=sum(h.utilization.hours_consumed for h in healths),
        total_remaining=sum(h.utilization.hours_remaining for h in healths),
        total_clients=len(healths),
        at_risk_clients=sum(1 for h in healths if h.risk.is_at_risk),
        amc_period_start=earliest(h.client.amc_start_date for h in healths),
        amc_period_end=latest(h.client.amc_end_date for h in healths),
    )


def at_risk_clients(per_client: Iterable[ClientHealth]) -> List[ClientHealth]:
    """Clients flagged as expiring or low on hours, soonest expiry first"""
    flagged = [h for h in per_client if h.risk.is_at_risk]

    # Undated contracts sort after dated ones
    return sorted(
        flagged,
        key=lambda h: (
            h.risk.days_until_expiry is None,
            h.risk.days_until_expiry or 0,
        ),
    )
