"""Hour allocation - pro-rates an annual hour budget by payment term"""

from typing import Dict, Optional
from amc_portal.domain.models import HourAllocation, PaymentTerm
from amc_portal.domain.exceptions import InvalidAllocationInput, UnrecognizedPaymentTerm

# Billing periods per year
TERM_DIVISORS: Dict[PaymentTerm, int] = {
    PaymentTerm.MONTHLY: 12,
    PaymentTerm.QUARTERLY: 4,
    PaymentTerm.HALF_YEARLY: 2,
    PaymentTerm.YEARLY: 1,
}


def parse_payment_term(value: object) -> PaymentTerm:
    """
    Coerce a raw payment term into the enum.

    Accepts enum members, their stored values ("Half-Yearly") and member
    names ("HALF_YEARLY").

    Raises:
        UnrecognizedPaymentTerm: For None or anything outside the four terms
    """
    if isinstance(value, PaymentTerm):
        return value
    if isinstance(value, str):
        try:
            return PaymentTerm(value)
        except ValueError:
            pass
        if value in PaymentTerm.__members__:
            return PaymentTerm[value]
    raise UnrecognizedPaymentTerm(value)


def resolve_annual_hours(hours_assigned_year: Optional[float], default: float) -> float:
    """Substitute the configured fallback when a client has no annual budget"""
    return default if hours_assigned_year is None else hours_assigned_year


def allocate(
    hours_assigned_year: float,
    payment_term: object,
    allow_unknown_term: bool = False,
) -> HourAllocation:
    """
    Break an annual hour budget down per billing period.

    per_month = h / 12, per_quarter = per_month * 3, per_half_year = per_month * 6,
    per_year = h. The active allocation is the breakdown value for the
    client's payment term.

    Args:
        hours_assigned_year: Annual budget, already defaulted by the caller
        payment_term: PaymentTerm or its raw stored value
        allow_unknown_term: Use the monthly figure for unrecognized terms
            instead of raising

    Raises:
        InvalidAllocationInput: Negative annual budget
        UnrecognizedPaymentTerm: Unknown term and allow_unknown_term is off

    Example:
        allocate(1200, "Monthly").active_allocation == 100.0
    """
    if hours_assigned_year is None or hours_assigned_year < 0:
        raise InvalidAllocationInput(
            f"hours_assigned_year must be >= 0, got {hours_assigned_year!r}"
        )

    per_month = hours_assigned_year / 12

    try:
        term: Optional[PaymentTerm] = parse_payment_term(payment_term)
    except UnrecognizedPaymentTerm:
        if not allow_unknown_term:
            raise
        term = None

    breakdown = {
        PaymentTerm.MONTHLY: per_month,
        PaymentTerm.QUARTERLY: per_month * 3,
        PaymentTerm.HALF_YEARLY: per_month * 6,
        PaymentTerm.YEARLY: hours_assigned_year,
    }

    return HourAllocation(
        per_month=breakdown[PaymentTerm.MONTHLY],
        per_quarter=breakdown[PaymentTerm.QUARTERLY],
        per_half_year=breakdown[PaymentTerm.HALF_YEARLY],
        per_year=breakdown[PaymentTerm.YEARLY],
        # Unknown terms (opt-in only) fall back to the monthly figure
        active_allocation=per_month if term is None else breakdown[term],
        payment_term=term,
    )
