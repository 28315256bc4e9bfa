"""Best Agent API - caller ID status lookup for voice agents."""

from bestagent.core.models import CustomerRecord, PackageInfo, Status, StatusResult
from bestagent.core.status_engine import determine_status
from bestagent.utils.phone import clean_phone

__version__ = "1.0.0"

__all__ = [
    "CustomerRecord",
    "PackageInfo",
    "Status",
    "StatusResult",
    "determine_status",
    "clean_phone",
]
