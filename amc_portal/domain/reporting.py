"""CSV export of work logs"""

import csv
import io
from typing import Iterable
from amc_portal.domain.models import WorkLogEntry

WORK_LOG_CSV_HEADER = ["Date", "Work Description", "Hours Consumed", "Start Date", "End Date", "Status"]


def work_logs_to_csv(entries: Iterable[WorkLogEntry]) -> str:
    """Render work logs as CSV text, one row per entry in the given order"""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(WORK_LOG_CSV_HEADER)

    for entry in entries:
        writer.writerow(
            [
                entry.date.isoformat(),
                entry.work_description,
                entry.hours_consumed,
                entry.start_date.isoformat() if entry.start_date else "",
                entry.end_date.isoformat() if entry.end_date else "",
                entry.status.value if entry.status else "",
            ]
        )

    return output.getvalue()
