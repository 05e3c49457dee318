"""/v1/clients - client records and per-client contract health"""

import time
import logging
from dataclasses import asdict
import uuid
from datetime import date
from typing import Iterable, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from amc_portal.api.v1.schemas import (
    AllocationSchema,
    ClientCreate,
    ClientHealthResponse,
    ClientResponse,
    ClientUpdate,
    FinancialsSchema,
    RiskSchema,
    UtilizationSchema,
)
from amc_portal.api.dependencies import get_as_of, get_health_policy, get_request_id, load_client
from amc_portal.infrastructure.database.session import get_db
from amc_portal.infrastructure.database.models import Client
from amc_portal.infrastructure.database.repositories import (
    AdminRepository,
    ClientRepository,
    PaymentRepository,
    WorkLogRepository,
    client_to_domain,
)
from amc_portal.domain.models import HealthPolicy
from amc_portal.domain.portfolio import assess_client
from amc_portal.domain.exceptions import InvalidAllocationInput, UnrecognizedPaymentTerm
from amc_portal.infrastructure.observability.metrics import record_assessment
from amc_portal.infrastructure.observability.logging import log_assessment

router = APIRouter()


def to_client_response(db_client: Client) -> ClientResponse:
    """Serialize a client row, resolving optional POC names"""
    return ClientResponse(
        id=str(db_client.id),
        project_slug=db_client.project_slug,
        project_name=db_client.project_name,
        client_name=db_client.client_name,
        cost_for_year=db_client.cost_for_year or 0.0,
        hours_assigned_year=db_client.hours_assigned_year,
        payment_term=db_client.payment_term,
        amc_start_date=db_client.amc_start_date,
        amc_end_date=db_client.amc_end_date,
        primary_poc_name=db_client.primary_poc.name if db_client.primary_poc else None,
        secondary_poc_name=db_client.secondary_poc.name if db_client.secondary_poc else None,
        admin_ids=[str(a.admin_id) for a in db_client.assignments],
    )


def check_admins_exist(db: Session, admin_ids: Iterable[Optional[uuid.UUID]]) -> None:
    """Answer 422 when a referenced admin does not exist"""
    admin_repo = AdminRepository(db)
    referenced = set(admin_ids)
    referenced.discard(None)
    missing = [str(a) for a in referenced if admin_repo.get_admin(a) is None]
    if missing:
        raise HTTPException(status_code=422, detail=f"Unknown admin(s): {', '.join(sorted(missing))}")


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(request_body: ClientCreate, request: Request, db: Session = Depends(get_db)):
    """
    Register a client with its AMC terms.

    Referenced admins (points of contact and assignments) must exist.
    """
    request_id = get_request_id(request)
    check_admins_exist(db, [request_body.ting_poc_primary, request_body.ting_poc_secondary, *request_body.admin_ids])

    fields = request_body.model_dump(exclude={"admin_ids"})
    fields["payment_term"] = request_body.payment_term.value

    try:
        db_client = ClientRepository(db).create_client(admin_ids=request_body.admin_ids, **fields)
        db.commit()
    except IntegrityError:
        db.rollback()
        logging.warning("Duplicate project slug", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Client with this project slug already exists")

    db.refresh(db_client)
    logging.info("Client created", extra={"request_id": request_id, "client_id": str(db_client.id)})
    return to_client_response(db_client)


@router.get("/clients", response_model=List[ClientResponse])
def list_clients(db: Session = Depends(get_db)):
    return [to_client_response(c) for c in ClientRepository(db).list_clients()]


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(client_id: str, db: Session = Depends(get_db)):
    return to_client_response(load_client(db, client_id))


@router.patch("/clients/{client_id}", response_model=ClientResponse)
def update_client(client_id: str, request_body: ClientUpdate, request: Request, db: Session = Depends(get_db)):
    """
    Change a client's details or contract terms.

    The AMC period is validated on the merged result, so moving only one of
    the two dates cannot leave the end before the start.
    """
    request_id = get_request_id(request)
    db_client = load_client(db, client_id)
    changes = request_body.model_dump(exclude_unset=True)

    start = changes.get("amc_start_date", db_client.amc_start_date)
    end = changes.get("amc_end_date", db_client.amc_end_date)
    if start and end and end < start:
        raise HTTPException(status_code=422, detail="amc_end_date must not be before amc_start_date")

    check_admins_exist(
        db, [changes.get("ting_poc_primary"), changes.get("ting_poc_secondary"), *changes.get("admin_ids", [])]
    )
    if "payment_term" in changes:
        changes["payment_term"] = request_body.payment_term.value

    admin_ids = changes.pop("admin_ids", None)
    try:
        ClientRepository(db).update_client(db_client, admin_ids=admin_ids, **changes)
        db.commit()
    except IntegrityError:
        db.rollback()
        logging.warning("Duplicate project slug", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Client with this project slug already exists")

    db.refresh(db_client)
    logging.info(
        "Client updated",
        extra={"request_id": request_id, "client_id": client_id, "fields": sorted(request_body.model_fields_set)},
    )
    return to_client_response(db_client)


@router.delete("/clients/{client_id}", status_code=204)
def delete_client(client_id: str, request: Request, db: Session = Depends(get_db)):
    """Remove a client together with its work logs, payments and hour requests"""
    db_client = load_client(db, client_id)

    ClientRepository(db).delete_client(db_client)
    db.commit()

    logging.info("Client deleted", extra={"request_id": get_request_id(request), "client_id": client_id})
    return Response(status_code=204)


@router.get("/clients/{client_id}/health", response_model=ClientHealthResponse)
def get_client_health(
    client_id: str,
    request: Request,
    as_of: date = Depends(get_as_of),
    policy: HealthPolicy = Depends(get_health_policy),
    db: Session = Depends(get_db),
):
    """
    Compute contract health for one client.

    Flow:
    1. Load client, work logs and payments from one session
    2. Allocate hours for the payment term and measure utilization
    3. Reconcile payments against the annual cost
    4. Classify expiry and low-hours risk as of the given date
    """
    start_time = time.time()
    request_id = get_request_id(request)

    db_client = load_client(db, client_id)
    work_logs = WorkLogRepository(db).entries_for_client(db_client.id)
    payments = PaymentRepository(db).records_for_client(db_client.id)

    try:
        health = assess_client(client_to_domain(db_client), work_logs, payments, as_of, policy)
    except (InvalidAllocationInput, UnrecognizedPaymentTerm) as e:
        logging.warning(f"Cannot assess client: {e}", extra={"request_id": request_id, "client_id": client_id})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_assessment(health)
    log_assessment(request_id, health, duration_ms)

    return ClientHealthResponse(
        client_id=str(db_client.id),
        project_name=db_client.project_name,
        as_of=as_of,
        amc_start_date=db_client.amc_start_date,
        amc_end_date=db_client.amc_end_date,
        primary_poc_name=db_client.primary_poc.name if db_client.primary_poc else None,
        secondary_poc_name=db_client.secondary_poc.name if db_client.secondary_poc else None,
        allocation=AllocationSchema(**asdict(health.allocation)),
        utilization=UtilizationSchema(**asdict(health.utilization)),
        financials=FinancialsSchema(**asdict(health.financials)),
        risk=RiskSchema(**asdict(health.risk)),
    )
