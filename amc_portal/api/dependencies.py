"""Dependency injection for FastAPI endpoints"""

import uuid
from datetime import date
from typing import Optional
from fastapi import HTTPException, Query, Request
from sqlalchemy.orm import Session
from amc_portal.config import settings
from amc_portal.domain.models import HealthPolicy
from amc_portal.infrastructure.database.models import Client
from amc_portal.infrastructure.database.repositories import ClientRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_health_policy() -> HealthPolicy:
    """Provide the contract health policy configured for this deployment"""
    return HealthPolicy(
        expiry_window_days=settings.expiry_window_days,
        low_hours_threshold=settings.low_hours_threshold,
        default_hours_assigned_year=settings.default_hours_assigned_year,
        allow_unknown_payment_term=settings.allow_unknown_payment_term,
    )


def get_as_of(
    as_of: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
) -> date:
    """Evaluation date for health computations; the only place the clock is read"""
    return as_of or date.today()


def parse_id(value: str, entity: str) -> uuid.UUID:
    """Parse a path identifier, answering 400 on malformed input"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {entity} ID format")


def load_client(db: Session, client_id: str) -> Client:
    """Fetch a client row or answer 404"""
    db_client = ClientRepository(db).get_client(parse_id(client_id, "client"))
    if not db_client:
        raise HTTPException(status_code=404, detail="Client not found")
    return db_client
