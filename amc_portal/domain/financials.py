"""Payment reconciliation against the contracted annual cost"""

from typing import Iterable
from amc_portal.domain.models import FinancialResult, PaymentRecord


def compute_financials(payments: Iterable[PaymentRecord], cost_for_year: float) -> FinancialResult:
    """Sum payments for one client; overpayment leaves a negative remainder"""
    amount_paid = sum(p.amount_paid for p in payments)

    return FinancialResult(
        cost_for_year=cost_for_year,
        amount_paid=amount_paid,
        amount_remaining=cost_for_year - amount_paid,
    )
