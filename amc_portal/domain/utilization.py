"""Hour utilization against the active allocation"""

from typing import Iterable, Optional
from amc_portal.domain.models import HourAllocation, UtilizationResult, WorkLogEntry
from amc_portal.domain.allocation import parse_payment_term


def compute_utilization(
    work_logs: Iterable[WorkLogEntry],
    allocation: HourAllocation,
    payment_term: Optional[object] = None,
) -> UtilizationResult:
    """
    Compare lifetime-to-date consumed hours with the allocated hours.

    Work logs are expected to be scoped to one client already; no filtering
    happens here. Remaining hours are not clamped, overconsumption shows up
    as a negative balance.

    Args:
        work_logs: Entries for a single client
        allocation: Output of allocate()
        payment_term: Term to measure against; defaults to the allocation's
            active term
    """
    hours_consumed = sum(log.hours_consumed for log in work_logs)

    if payment_term is None:
        hours_allocated = allocation.active_allocation
    else:
        hours_allocated = allocation.for_term(parse_payment_term(payment_term))

    # Avoid division by zero for clients with no budget
    utilization_ratio = hours_consumed / hours_allocated if hours_allocated > 0 else 0.0

    return UtilizationResult(
        hours_consumed=hours_consumed,
        hours_allocated=hours_allocated,
        hours_remaining=hours_allocated - hours_consumed,
        utilization_ratio=utilization_ratio,
    )
