"""/v1/portfolio - dashboard totals and the at-risk client list"""

import logging
from datetime import date
from typing import List, Tuple
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from amc_portal.api.v1.schemas import AtRiskClientItem, AtRiskResponse, PortfolioSummaryResponse
from amc_portal.api.dependencies import get_as_of, get_health_policy, get_request_id
from amc_portal.infrastructure.database.session import get_db
from amc_portal.infrastructure.database.repositories import (
    ClientRepository,
    PaymentRepository,
    WorkLogRepository,
    client_to_domain,
)
from amc_portal.domain.models import ClientHealth, HealthPolicy
from amc_portal.domain.portfolio import aggregate, assess_client, at_risk_clients
from amc_portal.domain.exceptions import InvalidAllocationInput, UnrecognizedPaymentTerm
from amc_portal.infrastructure.observability.metrics import (
    record_portfolio,
    skipped_client_counter,
)

router = APIRouter()


def assess_portfolio(
    db: Session, as_of: date, policy: HealthPolicy, request_id: str
) -> Tuple[List[ClientHealth], List[str]]:
    """
    Assess every client from one snapshot.

    Clients, work logs and payments are read in three bulk queries and
    grouped by client. Clients whose records fail domain validation are
    skipped and their ids returned alongside the results.
    """
    clients = ClientRepository(db).list_clients()
    work_logs = WorkLogRepository(db).entries_by_client()
    payments = PaymentRepository(db).records_by_client()

    healths: List[ClientHealth] = []
    skipped: List[str] = []
    for db_client in clients:
        try:
            health = assess_client(
                client_to_domain(db_client),
                work_logs.get(db_client.id, []),
                payments.get(db_client.id, []),
                as_of,
                policy,
            )
        except (InvalidAllocationInput, UnrecognizedPaymentTerm) as e:
            skipped.append(str(db_client.id))
            skipped_client_counter.inc()
            logging.warning(
                f"Skipping client in portfolio: {e}",
                extra={"request_id": request_id, "client_id": str(db_client.id)},
            )
            continue

        healths.append(health)

    return healths, skipped


@router.get("/portfolio/summary", response_model=PortfolioSummaryResponse)
def get_portfolio_summary(
    request: Request,
    as_of: date = Depends(get_as_of),
    policy: HealthPolicy = Depends(get_health_policy),
    db: Session = Depends(get_db),
):
    """Totals paid, consumed and remaining across all clients"""
    healths, skipped = assess_portfolio(db, as_of, policy, get_request_id(request))
    summary = aggregate(healths)
    record_portfolio(summary, endpoint="summary")

    return PortfolioSummaryResponse(
        as_of=as_of,
        total_paid=summary.total_paid,
        total_consumed=summary.total_consumed,
        total_remaining=summary.total_remaining,
        total_clients=summary.total_clients,
        at_risk_clients=summary.at_risk_clients,
        amc_period_start=summary.amc_period_start,
        amc_period_end=summary.amc_period_end,
        skipped_clients=skipped,
    )


@router.get("/portfolio/at-risk", response_model=AtRiskResponse)
def get_at_risk_clients(
    request: Request,
    as_of: date = Depends(get_as_of),
    policy: HealthPolicy = Depends(get_health_policy),
    db: Session = Depends(get_db),
):
    """Clients whose AMC expires soon or whose hours are nearly used up"""
    healths, skipped = assess_portfolio(db, as_of, policy, get_request_id(request))
    record_portfolio(aggregate(healths), endpoint="at_risk")

    items = [
        AtRiskClientItem(
            client_id=str(h.client.id),
            project_name=h.client.project_name,
            amc_end_date=h.client.amc_end_date,
            days_until_expiry=h.risk.days_until_expiry,
            hours_remaining=h.utilization.hours_remaining,
            hours_remaining_ratio=h.risk.hours_remaining_ratio,
            is_expiring_soon=h.risk.is_expiring_soon,
            is_low_hours=h.risk.is_low_hours,
        )
        for h in at_risk_clients(healths)
    ]

    return AtRiskResponse(as_of=as_of, clients=items, skipped_clients=skipped)
