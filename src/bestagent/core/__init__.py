"""Core domain models and the status decision list."""

from bestagent.core.models import (
    CustomerRecord,
    DepositSummary,
    PackageInfo,
    Status,
    StatusResult,
)
from bestagent.core.status_engine import (
    Channel,
    classify_channel,
    determine_status,
    reconcile_deposits,
)

__all__ = [
    "CustomerRecord",
    "PackageInfo",
    "DepositSummary",
    "Status",
    "StatusResult",
    "Channel",
    "classify_channel",
    "determine_status",
    "reconcile_deposits",
]
