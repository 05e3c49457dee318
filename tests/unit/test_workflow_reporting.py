"""Unit tests for status transitions and work log CSV export"""

import csv
import io
import uuid
import pytest
from datetime import date
from amc_portal.domain.models import RequestStatus, WorkLogEntry, WorkStatus
from amc_portal.domain.workflow import parse_work_status, transition_request_status, transition_work_status
from amc_portal.domain.reporting import WORK_LOG_CSV_HEADER, work_logs_to_csv
from amc_portal.domain.exceptions import InvalidStatusTransition


@pytest.mark.parametrize(
    "current, target",
    [
        (WorkStatus.PENDING, WorkStatus.IN_PROGRESS),
        (WorkStatus.PENDING, WorkStatus.COMPLETED),
        (WorkStatus.IN_PROGRESS, WorkStatus.COMPLETED),
        (WorkStatus.IN_PROGRESS, WorkStatus.IN_PROGRESS),
    ],
)
def test_work_status_allowed(current, target):
    assert transition_work_status(current, target) is target


@pytest.mark.parametrize(
    "current, target",
    [
        (WorkStatus.IN_PROGRESS, WorkStatus.PENDING),
        (WorkStatus.COMPLETED, WorkStatus.PENDING),
        (WorkStatus.COMPLETED, WorkStatus.IN_PROGRESS),
    ],
)
def test_work_status_rejected(current, target):
    with pytest.raises(InvalidStatusTransition) as exc_info:
        transition_work_status(current, target)
    assert exc_info.value.current == current.value
    assert exc_info.value.target == target.value


def test_work_status_accepts_raw_values():
    assert transition_work_status("pending", "in_progress") is WorkStatus.IN_PROGRESS


def test_parse_work_status_known_values():
    assert parse_work_status("in_progress") is WorkStatus.IN_PROGRESS
    assert parse_work_status(WorkStatus.COMPLETED) is WorkStatus.COMPLETED


@pytest.mark.parametrize("stored", ["approved", "rejected", "", None])
def test_parse_work_status_outside_workflow(stored):
    assert parse_work_status(stored) is None


def test_work_status_from_status_outside_workflow():
    with pytest.raises(InvalidStatusTransition) as exc_info:
        transition_work_status("approved", WorkStatus.COMPLETED)
    assert exc_info.value.current == "approved"
    assert exc_info.value.target == "completed"


def test_request_status_decisions():
    assert transition_request_status(RequestStatus.PENDING, RequestStatus.APPROVED) is RequestStatus.APPROVED
    assert transition_request_status(RequestStatus.PENDING, RequestStatus.REJECTED) is RequestStatus.REJECTED


@pytest.mark.parametrize(
    "current, target",
    [
        (RequestStatus.APPROVED, RequestStatus.REJECTED),
        (RequestStatus.REJECTED, RequestStatus.APPROVED),
        (RequestStatus.APPROVED, RequestStatus.APPROVED),
        (RequestStatus.PENDING, RequestStatus.PENDING),
    ],
)
def test_request_status_final_once_decided(current, target):
    with pytest.raises(InvalidStatusTransition):
        transition_request_status(current, target)


def test_work_logs_to_csv():
    client_id = uuid.uuid4()
    entries = [
        WorkLogEntry(
            client_id=client_id,
            hours_consumed=3.5,
            date=date(2024, 2, 10),
            work_description='Patched "checkout", rotated keys',
            start_date=date(2024, 2, 9),
            end_date=date(2024, 2, 10),
            status=WorkStatus.COMPLETED,
        ),
        WorkLogEntry(client_id=client_id, hours_consumed=1, date=date(2024, 2, 12), work_description="Triage"),
    ]

    rows = list(csv.reader(io.StringIO(work_logs_to_csv(entries))))

    assert rows[0] == WORK_LOG_CSV_HEADER
    assert rows[1] == ["2024-02-10", 'Patched "checkout", rotated keys', "3.5", "2024-02-09", "2024-02-10", "completed"]
    assert rows[2] == ["2024-02-12", "Triage", "1", "", "", "pending"]


def test_work_logs_to_csv_empty():
    rows = list(csv.reader(io.StringIO(work_logs_to_csv([]))))
    assert rows == [WORK_LOG_CSV_HEADER]


def test_work_logs_to_csv_status_outside_workflow():
    entry = WorkLogEntry(client_id=uuid.uuid4(), hours_consumed=2, date=date(2024, 2, 1), status=None)

    rows = list(csv.reader(io.StringIO(work_logs_to_csv([entry]))))

    assert rows[1][-1] == ""
