"""Customer lookup and status evaluation shared by the HTTP handlers."""

import logging
from datetime import date, datetime
from typing import Any

import httpx

from bestagent.caspio.auth import TokenCache
from bestagent.caspio.client import CaspioClient
from bestagent.caspio.filters import any_of, equals, parse_account_id
from bestagent.caspio.packages import PackageLookup
from bestagent.config import Settings
from bestagent.core.models import CustomerRecord, PackageInfo, StatusResult
from bestagent.core.status_engine import determine_status
from bestagent.utils.dates import is_business_hours, parse_timestamp
from bestagent.utils.phone import clean_phone

logger = logging.getLogger(__name__)


def sort_newest_first(customers: list[CustomerRecord]) -> list[CustomerRecord]:
    """Order records by entry timestamp, newest first.

    Records without a usable timestamp sort as the oldest. Ties keep their
    query order.
    """
    def entered(customer: CustomerRecord) -> datetime:
        return parse_timestamp(customer.entered_on) or datetime.min

    return sorted(customers, key=entered, reverse=True)


class CustomerStatusService:
    """Composes customer queries, package lookup and the status engine."""

    def __init__(
        self,
        client: CaspioClient,
        packages: PackageLookup,
        settings: Settings,
    ):
        self.client = client
        self.packages = packages
        self.settings = settings

    def find_by_phone(self, phone: str) -> list[CustomerRecord]:
        """Find every record whose primary or secondary phone matches.

        Args:
            phone: Phone number in any format; it is cleaned to digits

        Returns:
            Matching records, newest first
        """
        phone = clean_phone(phone)
        if not phone:
            return []

        where = any_of(equals("phn1", phone), equals("phn2", phone))
        rows = self.client.query(self.settings.customer_table, where)
        return sort_newest_first(self._to_records(rows))

    def find_by_account(self, vac_id: Any) -> CustomerRecord | None:
        """Find the record with the given account identifier.

        Raises:
            InvalidFilterError: If ``vac_id`` is not a whole number
        """
        account_id = parse_account_id(vac_id)
        rows = self.client.query(self.settings.customer_table, equals("vac_id", account_id))
        records = self._to_records(rows)
        return records[0] if records else None

    def evaluate(
        self,
        customer: CustomerRecord,
        fallback_pkg_code: str | None = None,
        today: date | None = None,
    ) -> tuple[StatusResult, PackageInfo | None]:
        """Resolve the customer's package and run the status engine."""
        package = self.packages.resolve(customer.pkg_code2 or fallback_pkg_code)
        result = determine_status(customer, package, today)
        logger.info(
            "Status for %s (vac_id %s): %s",
            customer.full_name,
            customer.vac_id,
            result.status.value,
        )
        return result, package

    def is_business_hours(self) -> bool:
        return is_business_hours(
            timezone=self.settings.business_timezone,
            open_hour=self.settings.business_open_hour,
            close_hour=self.settings.business_close_hour,
        )

    @staticmethod
    def _to_records(rows: list[dict[str, Any]]) -> list[CustomerRecord]:
        return [CustomerRecord.model_validate(row) for row in rows]


def build_service(settings: Settings, http_client: httpx.Client) -> CustomerStatusService:
    """Wire the token cache, Caspio client and package lookup together."""
    token_cache = TokenCache(
        token_url=settings.token_url,
        client_id=settings.caspio_client_id,
        client_secret=settings.caspio_client_secret,
        http_client=http_client,
        expiry_margin=settings.token_expiry_margin,
    )
    client = CaspioClient(
        base_url=settings.base_url,
        token_cache=token_cache,
        http_client=http_client,
        page_size=settings.page_size,
    )
    packages = PackageLookup(client, table=settings.package_table)
    return CustomerStatusService(client, packages, settings)
