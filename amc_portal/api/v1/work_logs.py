"""/v1 work log endpoints - logging hours, edits, status changes and CSV export"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from amc_portal.api.v1.schemas import WorkLogCreate, WorkLogResponse, WorkLogStatusUpdate, WorkLogUpdate
from amc_portal.api.dependencies import get_request_id, load_client, parse_id
from amc_portal.infrastructure.database.session import get_db
from amc_portal.infrastructure.database.models import WorkLog
from amc_portal.infrastructure.database.repositories import WorkLogRepository, work_log_to_domain
from amc_portal.domain.models import WorkStatus
from amc_portal.domain.reporting import work_logs_to_csv
from amc_portal.domain.workflow import transition_work_status
from amc_portal.domain.exceptions import InvalidStatusTransition
from amc_portal.infrastructure.observability.metrics import status_transition_counter

router = APIRouter()


def to_work_log_response(db_log: WorkLog) -> WorkLogResponse:
    return WorkLogResponse(
        id=str(db_log.id),
        client_id=str(db_log.client_id),
        project_name=db_log.client.project_name if db_log.client else None,
        date=db_log.date,
        work_description=db_log.work_description,
        hours_consumed=db_log.hours_consumed,
        start_date=db_log.start_date,
        end_date=db_log.end_date,
        status=db_log.status,
    )


def load_work_log(work_log_repo: WorkLogRepository, work_log_id: str) -> WorkLog:
    db_log = work_log_repo.get_work_log(parse_id(work_log_id, "work log"))
    if not db_log:
        raise HTTPException(status_code=404, detail="Work log not found")
    return db_log


def apply_status_change(db_log: WorkLog, target: WorkStatus, request_id: str) -> WorkStatus:
    """Validate a status change against the workflow, answering 409 when it is not allowed"""
    try:
        return transition_work_status(db_log.status, target)
    except InvalidStatusTransition as e:
        logging.warning(f"Rejected status change: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/clients/{client_id}/work-logs", response_model=WorkLogResponse, status_code=201)
def create_work_log(client_id: str, request_body: WorkLogCreate, request: Request, db: Session = Depends(get_db)):
    db_client = load_client(db, client_id)

    db_log = WorkLogRepository(db).create_work_log(
        client_id=db_client.id,
        log_date=request_body.date,
        work_description=request_body.work_description,
        hours_consumed=request_body.hours_consumed,
        start_date=request_body.start_date,
        end_date=request_body.end_date,
        status=request_body.status,
    )
    db.commit()

    logging.info(
        "Work log recorded",
        extra={
            "request_id": get_request_id(request),
            "client_id": client_id,
            "hours_consumed": request_body.hours_consumed,
        },
    )
    return to_work_log_response(db_log)


@router.get("/clients/{client_id}/work-logs", response_model=List[WorkLogResponse])
def list_client_work_logs(client_id: str, db: Session = Depends(get_db)):
    db_client = load_client(db, client_id)
    return [to_work_log_response(w) for w in WorkLogRepository(db).list_for_client(db_client.id)]


@router.get("/clients/{client_id}/work-logs/export")
def export_work_logs(client_id: str, db: Session = Depends(get_db)):
    """Download a client's work logs as CSV, most recent first"""
    db_client = load_client(db, client_id)
    entries = [work_log_to_domain(w) for w in WorkLogRepository(db).list_for_client(db_client.id)]

    filename = f"{db_client.project_slug}-work-logs.csv"
    return Response(
        content=work_logs_to_csv(entries),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/work-logs", response_model=List[WorkLogResponse])
def list_work_logs(
    status: Optional[WorkStatus] = Query(None, description="Filter by work log status"),
    client_id: Optional[str] = Query(None, description="Restrict to one client"),
    db: Session = Depends(get_db),
):
    """Work logs across all clients, most recent first"""
    client_uuid = parse_id(client_id, "client") if client_id else None
    return [to_work_log_response(w) for w in WorkLogRepository(db).list_work_logs(status, client_uuid)]


@router.patch("/work-logs/{work_log_id}", response_model=WorkLogResponse)
def update_work_log(
    work_log_id: str,
    request_body: WorkLogUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Edit a work log.

    Hours, description and dates are replaced as given. A status in the
    body must be reachable from the current one.
    """
    request_id = get_request_id(request)
    work_log_repo = WorkLogRepository(db)
    db_log = load_work_log(work_log_repo, work_log_id)

    changes = request_body.model_dump(exclude_unset=True)
    if "log_date" in changes:
        changes["date"] = changes.pop("log_date")
    if "status" in changes:
        changes["status"] = apply_status_change(db_log, request_body.status, request_id).value

    work_log_repo.update_work_log(db_log, **changes)
    db.commit()

    if "status" in changes:
        status_transition_counter.labels(entity="work_log", status=changes["status"]).inc()
    logging.info(
        "Work log updated",
        extra={"request_id": request_id, "work_log_id": work_log_id, "fields": sorted(changes)},
    )
    return to_work_log_response(db_log)


@router.delete("/work-logs/{work_log_id}", status_code=204)
def delete_work_log(work_log_id: str, request: Request, db: Session = Depends(get_db)):
    work_log_repo = WorkLogRepository(db)
    db_log = load_work_log(work_log_repo, work_log_id)

    work_log_repo.delete_work_log(db_log)
    db.commit()

    logging.info("Work log deleted", extra={"request_id": get_request_id(request), "work_log_id": work_log_id})
    return Response(status_code=204)


@router.patch("/work-logs/{work_log_id}/status", response_model=WorkLogResponse)
def update_work_log_status(
    work_log_id: str,
    request_body: WorkLogStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Move a work log through pending -> in_progress -> completed.

    Completed logs are final; skipping in_progress is allowed.
    """
    work_log_repo = WorkLogRepository(db)
    db_log = load_work_log(work_log_repo, work_log_id)

    new_status = apply_status_change(db_log, request_body.status, get_request_id(request))

    work_log_repo.set_status(db_log, new_status)
    db.commit()
    status_transition_counter.labels(entity="work_log", status=new_status.value).inc()

    return to_work_log_response(db_log)
