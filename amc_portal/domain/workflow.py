"""Status transitions for work logs and hour requests"""

from typing import Dict, FrozenSet, Optional
from amc_portal.domain.models import RequestStatus, WorkStatus
from amc_portal.domain.exceptions import InvalidStatusTransition

WORK_STATUS_TRANSITIONS: Dict[WorkStatus, FrozenSet[WorkStatus]] = {
    WorkStatus.PENDING: frozenset({WorkStatus.IN_PROGRESS, WorkStatus.COMPLETED}),
    WorkStatus.IN_PROGRESS: frozenset({WorkStatus.COMPLETED}),
    WorkStatus.COMPLETED: frozenset(),
}

REQUEST_STATUS_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}


def parse_work_status(value: object) -> Optional[WorkStatus]:
    """
    Read a stored work log status.

    Older rows may carry values outside the workflow (e.g. "approved").
    Those map to None; hour totals never depend on status.
    """
    try:
        return WorkStatus(value)
    except ValueError:
        return None


def transition_work_status(current: WorkStatus, target: WorkStatus) -> WorkStatus:
    """
    Validate a work log status change.

    Re-applying the current status is accepted as a no-op.

    Raises:
        InvalidStatusTransition: Target is not reachable from current, or
            current is not a workflow status
    """
    target = WorkStatus(target)
    known = parse_work_status(current)
    if known is None:
        raise InvalidStatusTransition(str(current), target.value)
    if target != known and target not in WORK_STATUS_TRANSITIONS[known]:
        raise InvalidStatusTransition(known.value, target.value)
    return target


def transition_request_status(current: RequestStatus, target: RequestStatus) -> RequestStatus:
    """Validate an hour request decision; approved and rejected are final"""
    current, target = RequestStatus(current), RequestStatus(target)
    if target not in REQUEST_STATUS_TRANSITIONS[current]:
        raise InvalidStatusTransition(current.value, target.value)
    return target
