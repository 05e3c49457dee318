"""/v1 hour request endpoints - clients asking for more hours, admins deciding"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from amc_portal.api.v1.schemas import HourRequestCreate, HourRequestResponse
from amc_portal.api.dependencies import get_request_id, load_client, parse_id
from amc_portal.infrastructure.database.session import get_db
from amc_portal.infrastructure.database.models import HourRequest
from amc_portal.infrastructure.database.repositories import HourRequestRepository
from amc_portal.domain.models import RequestStatus
from amc_portal.domain.workflow import transition_request_status
from amc_portal.domain.exceptions import InvalidStatusTransition
from amc_portal.infrastructure.observability.metrics import status_transition_counter

router = APIRouter()


def to_hour_request_response(db_request: HourRequest) -> HourRequestResponse:
    return HourRequestResponse(
        id=str(db_request.id),
        client_id=str(db_request.client_id),
        project_name=db_request.client.project_name if db_request.client else None,
        payment_term=db_request.client.payment_term if db_request.client else None,
        requested_hours=db_request.requested_hours,
        status=RequestStatus(db_request.status),
        created_at=db_request.created_at,
    )


@router.post("/clients/{client_id}/hour-requests", response_model=HourRequestResponse, status_code=201)
def create_hour_request(client_id: str, request_body: HourRequestCreate, db: Session = Depends(get_db)):
    db_client = load_client(db, client_id)

    db_request = HourRequestRepository(db).create_request(db_client.id, request_body.requested_hours)
    db.commit()
    db.refresh(db_request)

    return to_hour_request_response(db_request)


@router.get("/hour-requests", response_model=List[HourRequestResponse])
def list_hour_requests(
    status: Optional[RequestStatus] = Query(None, description="Filter by request status"),
    db: Session = Depends(get_db),
):
    return [to_hour_request_response(r) for r in HourRequestRepository(db).list_requests(status)]


def _decide(request_id_param: str, target: RequestStatus, request: Request, db: Session) -> HourRequestResponse:
    """Apply an approve/reject decision to a pending request"""
    request_id = get_request_id(request)
    hour_request_repo = HourRequestRepository(db)

    db_request = hour_request_repo.get_request(parse_id(request_id_param, "hour request"))
    if not db_request:
        raise HTTPException(status_code=404, detail="Hour request not found")

    try:
        new_status = transition_request_status(RequestStatus(db_request.status), target)
    except InvalidStatusTransition as e:
        logging.warning(f"Rejected decision: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    hour_request_repo.set_status(db_request, new_status)
    db.commit()
    status_transition_counter.labels(entity="hour_request", status=new_status.value).inc()

    # Approval only records the decision; consumed hours stay driven by work logs
    logging.info(
        f"Hour request {new_status.value}",
        extra={
            "request_id": request_id,
            "hour_request_id": str(db_request.id),
            "requested_hours": db_request.requested_hours,
        },
    )
    return to_hour_request_response(db_request)


@router.post("/hour-requests/{hour_request_id}/approve", response_model=HourRequestResponse)
def approve_hour_request(hour_request_id: str, request: Request, db: Session = Depends(get_db)):
    return _decide(hour_request_id, RequestStatus.APPROVED, request, db)


@router.post("/hour-requests/{hour_request_id}/reject", response_model=HourRequestResponse)
def reject_hour_request(hour_request_id: str, request: Request, db: Session = Depends(get_db)):
    return _decide(hour_request_id, RequestStatus.REJECTED, request, db)
