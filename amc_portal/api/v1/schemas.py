"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, UUID4, model_validator
from amc_portal.domain.models import PaymentTerm, RequestStatus, WorkStatus


def _reject_nulls(model: BaseModel, fields) -> None:
    """Partial updates may omit a field but not clear a required one"""
    cleared = [name for name in fields if name in model.model_fields_set and getattr(model, name) is None]
    if cleared:
        raise ValueError(f"{', '.join(cleared)} cannot be null")


class AdminCreate(BaseModel):
    """Request body for POST /v1/admins"""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    contact_number: Optional[str] = None


class AdminUpdate(BaseModel):
    """Request body for PATCH /v1/admins/{admin_id}; omitted fields are left as they are"""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    contact_number: Optional[str] = None

    @model_validator(mode="after")
    def check_required(self) -> "AdminUpdate":
        _reject_nulls(self, ("name", "email"))
        return self


class AdminClientItem(BaseModel):
    client_id: str
    project_name: Optional[str] = None
    role: str  # Primary | Secondary | Assigned


class AdminResponse(BaseModel):
    id: UUID4
    name: str
    email: str
    contact_number: Optional[str] = None
    client_count: int = 0
    clients: List[AdminClientItem] = Field(default_factory=list)


class ClientCreate(BaseModel):
    """Request body for POST /v1/clients"""

    project_slug: str = Field(..., min_length=1, max_length=120)
    project_name: Optional[str] = None
    client_name: Optional[str] = None
    email: Optional[str] = None
    poc_email: Optional[str] = None
    cost_for_year: float = Field(0, ge=0, description="Contracted annual cost")
    hours_assigned_year: Optional[float] = Field(None, ge=0, description="Annual hour budget; policy default when omitted")
    payment_term: PaymentTerm = PaymentTerm.MONTHLY
    amc_start_date: Optional[date] = None
    amc_end_date: Optional[date] = None
    ting_poc_primary: Optional[UUID4] = None
    ting_poc_secondary: Optional[UUID4] = None
    admin_ids: List[UUID4] = Field(default_factory=list, description="Admins assigned to the client")

    @model_validator(mode="after")
    def check_amc_period(self) -> "ClientCreate":
        if self.amc_start_date and self.amc_end_date and self.amc_end_date < self.amc_start_date:
            raise ValueError("amc_end_date must not be before amc_start_date")
        return self


class ClientUpdate(BaseModel):
    """
    Request body for PATCH /v1/clients/{client_id}.

    Only fields present in the body change. The AMC period is re-checked
    against the stored dates by the endpoint.
    """

    project_slug: Optional[str] = Field(None, min_length=1, max_length=120)
    project_name: Optional[str] = None
    client_name: Optional[str] = None
    email: Optional[str] = None
    poc_email: Optional[str] = None
    cost_for_year: Optional[float] = Field(None, ge=0)
    hours_assigned_year: Optional[float] = Field(None, ge=0)
    payment_term: Optional[PaymentTerm] = None
    amc_start_date: Optional[date] = None
    amc_end_date: Optional[date] = None
    ting_poc_primary: Optional[UUID4] = None
    ting_poc_secondary: Optional[UUID4] = None
    admin_ids: Optional[List[UUID4]] = None

    @model_validator(mode="after")
    def check_required(self) -> "ClientUpdate":
        _reject_nulls(self, ("project_slug", "cost_for_year", "payment_term", "admin_ids"))
        return self


class ClientResponse(BaseModel):
    id: str
    project_slug: str
    project_name: Optional[str] = None
    client_name: Optional[str] = None
    cost_for_year: float
    hours_assigned_year: Optional[float] = None
    payment_term: Optional[str] = None
    amc_start_date: Optional[date] = None
    amc_end_date: Optional[date] = None
    primary_poc_name: Optional[str] = None
    secondary_poc_name: Optional[str] = None
    admin_ids: List[str] = Field(default_factory=list)


class WorkLogCreate(BaseModel):
    """Request body for POST /v1/clients/{client_id}/work-logs"""

    date: date
    work_description: str = Field(..., min_length=1)
    hours_consumed: float = Field(..., ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: WorkStatus = WorkStatus.PENDING


class WorkLogStatusUpdate(BaseModel):
    """Request body for PATCH /v1/work-logs/{work_log_id}/status"""

    status: WorkStatus


class WorkLogUpdate(BaseModel):
    """Request body for PATCH /v1/work-logs/{work_log_id}; status changes follow the workflow"""

    log_date: Optional[date] = Field(None, alias="date")
    work_description: Optional[str] = Field(None, min_length=1)
    hours_consumed: Optional[float] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[WorkStatus] = None

    @model_validator(mode="after")
    def check_required(self) -> "WorkLogUpdate":
        _reject_nulls(self, ("log_date", "work_description", "hours_consumed", "status"))
        return self


class WorkLogResponse(BaseModel):
    id: str
    client_id: str
    project_name: Optional[str] = None
    date: date
    work_description: str
    hours_consumed: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str  # stored value; older rows may predate the workflow


class PaymentCreate(BaseModel):
    """Request body for POST /v1/clients/{client_id}/payments"""

    amount_paid: float = Field(..., ge=0)
    payment_date: date


class PaymentResponse(BaseModel):
    id: str
    client_id: str
    amount_paid: float
    payment_date: date


class HourRequestCreate(BaseModel):
    """Request body for POST /v1/clients/{client_id}/hour-requests"""

    requested_hours: float = Field(..., gt=0)


class HourRequestResponse(BaseModel):
    id: str
    client_id: str
    project_name: Optional[str] = None
    payment_term: Optional[str] = None
    requested_hours: float
    status: RequestStatus
    created_at: datetime


class AllocationSchema(BaseModel):
    per_month: float
    per_quarter: float
    per_half_year: float
    per_year: float
    active_allocation: float
    payment_term: Optional[PaymentTerm] = None


class UtilizationSchema(BaseModel):
    hours_consumed: float
    hours_allocated: float
    hours_remaining: float
    utilization_ratio: float


class FinancialsSchema(BaseModel):
    cost_for_year: float
    amount_paid: float
    amount_remaining: float


class RiskSchema(BaseModel):
    is_expiring_soon: bool
    is_low_hours: bool
    is_at_risk: bool
    days_until_expiry: Optional[int] = None
    hours_remaining_ratio: float


class ClientHealthResponse(BaseModel):
    """Response for GET /v1/clients/{client_id}/health"""

    client_id: str
    project_name: Optional[str] = None
    as_of: date
    amc_start_date: Optional[date] = None
    amc_end_date: Optional[date] = None
    primary_poc_name: Optional[str] = None
    secondary_poc_name: Optional[str] = None
    allocation: AllocationSchema
    utilization: UtilizationSchema
    financials: FinancialsSchema
    risk: RiskSchema


class PortfolioSummaryResponse(BaseModel):
    """Response for GET /v1/portfolio/summary"""

    as_of: date
    total_paid: float
    total_consumed: float
    total_remaining: float
    total_clients: int
    at_risk_clients: int
    amc_period_start: Optional[date] = None
    amc_period_end: Optional[date] = None
    skipped_clients: List[str] = Field(default_factory=list)


class AtRiskClientItem(BaseModel):
    client_id: str
    project_name: Optional[str] = None
    amc_end_date: Optional[date] = None
    days_until_expiry: Optional[int] = None
    hours_remaining: float
    hours_remaining_ratio: float
    is_expiring_soon: bool
    is_low_hours: bool


class AtRiskResponse(BaseModel):
    """Response for GET /v1/portfolio/at-risk"""

    as_of: date
    clients: List[AtRiskClientItem]
    skipped_clients: List[str] = Field(default_factory=list)
