"""Contract risk classification - expiring AMCs and low remaining hours"""

from datetime import date
from amc_portal.domain.models import Client, RiskVerdict, UtilizationResult
from amc_portal.utils.date_utils import days_until

DEFAULT_EXPIRY_WINDOW_DAYS = 60
DEFAULT_LOW_HOURS_THRESHOLD = 0.10


def classify_risk(
    client: Client,
    utilization: UtilizationResult,
    as_of: date,
    expiry_window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS,
    low_hours_threshold: float = DEFAULT_LOW_HOURS_THRESHOLD,
) -> RiskVerdict:
    """
    Flag a client whose AMC ends soon or whose hour budget is nearly spent.

    Signals:
    - Expiring: AMC end date within [0, expiry_window_days] days of as_of
      (both ends inclusive). Already-expired and undated contracts are not
      flagged.
    - Low hours: remaining / allocated strictly below low_hours_threshold.
      A client with no allocated hours has a ratio of 1 and is never low.

    as_of is always supplied by the caller so results are reproducible.
    """
    days_until_expiry = None
    is_expiring_soon = False
    if client.amc_end_date is not None:
        days_until_expiry = days_until(client.amc_end_date, as_of)
        is_expiring_soon = 0 <= days_until_expiry <= expiry_window_days

    if utilization.hours_allocated > 0:
        hours_remaining_ratio = utilization.hours_remaining / utilization.hours_allocated
    else:
        hours_remaining_ratio = 1.0

    is_low_hours = hours_remaining_ratio < low_hours_threshold

    return RiskVerdict(
        is_expiring_soon=is_expiring_soon,
        is_low_hours=is_low_hours,
        is_at_risk=is_expiring_soon or is_low_hours,
        days_until_expiry=days_until_expiry,
        hours_remaining_ratio=hours_remaining_ratio,
    )
