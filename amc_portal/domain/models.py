"""Domain models - pure Python dataclasses representing business entities"""

import enum
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional


class PaymentTerm(str, enum.Enum):
    """Billing cadence of an AMC"""

    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    HALF_YEARLY = "Half-Yearly"
    YEARLY = "Yearly"


class WorkStatus(str, enum.Enum):
    """Workflow state of a work log"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class RequestStatus(str, enum.Enum):
    """Approval state of an hour top-up request"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Client:
    """Contract terms of a client, as loaded from persistence"""

    id: uuid.UUID
    cost_for_year: float
    hours_assigned_year: Optional[float]
    payment_term: Optional[str]  # raw value, validated by the allocator
    amc_start_date: Optional[date] = None
    amc_end_date: Optional[date] = None
    project_name: Optional[str] = None
    client_name: Optional[str] = None


@dataclass(frozen=True)
class WorkLogEntry:
    """Hours spent on a client on a given day"""

    client_id: uuid.UUID
    hours_consumed: float
    date: date
    work_description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[WorkStatus] = WorkStatus.PENDING  # None for a stored status outside the workflow


@dataclass(frozen=True)
class PaymentRecord:
    """Money received from a client"""

    client_id: uuid.UUID
    amount_paid: float
    payment_date: date


@dataclass(frozen=True)
class HourAllocation:
    """Annual hour budget broken down per billing period"""

    per_month: float
    per_quarter: float
    per_half_year: float
    per_year: float
    active_allocation: float
    payment_term: Optional[PaymentTerm]  # None when the fallback was used

    def for_term(self, term: PaymentTerm) -> float:
        """Breakdown value matching a billing cadence"""
        return {
            PaymentTerm.MONTHLY: self.per_month,
            PaymentTerm.QUARTERLY: self.per_quarter,
            PaymentTerm.HALF_YEARLY: self.per_half_year,
            PaymentTerm.YEARLY: self.per_year,
        }[term]


@dataclass(frozen=True)
class UtilizationResult:
    """Consumed vs allocated hours for the active billing period"""

    hours_consumed: float
    hours_allocated: float
    hours_remaining: float  # negative on overconsumption
    utilization_ratio: float


@dataclass(frozen=True)
class FinancialResult:
    """Payments received vs contracted annual cost"""

    cost_for_year: float
    amount_paid: float
    amount_remaining: float  # negative on overpayment


@dataclass(frozen=True)
class RiskVerdict:
    """Expiry and low-hours signals for one client"""

    is_expiring_soon: bool
    is_low_hours: bool
    is_at_risk: bool
    days_until_expiry: Optional[int]
    hours_remaining_ratio: float


@dataclass(frozen=True)
class ClientHealth:
    """Everything derived for one client from a single snapshot"""

    client: Client
    allocation: HourAllocation
    utilization: UtilizationResult
    financials: FinancialResult
    risk: RiskVerdict


@dataclass(frozen=True)
class PortfolioSummary:
    """Dashboard totals across all assessed clients"""

    total_paid: float
    total_consumed: float
    total_remaining: float
    total_clients: int
    at_risk_clients: int
    amc_period_start: Optional[date] = None
    amc_period_end: Optional[date] = None


@dataclass(frozen=True)
class HealthPolicy:
    """Thresholds and fallbacks applied when assessing a client"""

    expiry_window_days: int = 60
    low_hours_threshold: float = 0.10
    default_hours_assigned_year: float = 2000.0
    allow_unknown_payment_term: bool = False
