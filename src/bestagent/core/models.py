"""Pydantic models for customer records, packages and computed status."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Status(str, Enum):
    """Lifecycle status codes, in decision-list order."""

    REFUND_PENDING = "Refund Pending"
    TRIP_COMPLETE = "Trip Complete"
    TRAVEL_PENDING = "Travel Pending"
    BOOKING_PENDING = "Booking Pending"
    TRAVEL_REP_ASSIGNED = "Travel Rep Assigned"
    WAITING_FOR_TRAVEL_REP = "Waiting For Travel Rep"
    READY_TO_SCHEDULE = "Ready to Schedule"
    DATES_SCHEDULED = "Dates Scheduled"
    MUST_RESCHEDULE = "Scheduled Not Confirmed - Must Reschedule"
    CAN_CONFIRM = "Scheduled Not Confirmed - Can Confirm"
    DEPOSIT_NEEDED = "Deposit Needed"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CustomerRecord(BaseModel):
    """A row of the customer (RIMS) table, addressed by its Caspio column names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    vac_id: int | None = Field(default=None, description="Internal numeric account identifier")
    first_name: str | None = Field(default=None, alias="p1F")
    last_name: str | None = Field(default=None, alias="p1L")
    email: str | None = Field(default=None)
    phone1: str | None = Field(default=None, alias="phn1")
    phone2: str | None = Field(default=None, alias="phn2")
    pkg_code2: str | None = Field(default=None, description="Package code")
    destination: str | None = Field(default=None, alias="dest")
    entered_on: str | None = Field(
        default=None, alias="val_entered_on", description="When the record was entered"
    )
    validated_deposit: float | None = Field(default=None, alias="val_dep")
    confirmation_deposit: float | None = Field(default=None, alias="conf_deposit")
    travel_date: str | None = Field(default=None, alias="asgn_trv_dt")
    travel_rep: str | None = Field(default=None, alias="tm")
    confirmation_code: str | None = Field(default=None, alias="conf_valid_code")
    cash_back_amount: float | None = Field(default=None, alias="cash_back_amt")
    final_doc_date: str | None = Field(default=None, alias="Fnl_Doc_MO_Date")
    itinerary_print_date: str | None = Field(default=None, alias="date_print_enc")
    decision_ready: bool | None = Field(default=None, alias="decReady")
    hotel_booked_date: str | None = Field(default=None, alias="date_htl_book")
    agency_booked_date: str | None = Field(default=None, alias="date_agncy_book")

    @field_validator(
        "validated_deposit",
        "confirmation_deposit",
        "cash_back_amount",
        "vac_id",
        "decision_ready",
        mode="before",
    )
    @classmethod
    def _blank_numbers(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator(
        "phone1",
        "phone2",
        "pkg_code2",
        "travel_date",
        "final_doc_date",
        "itinerary_print_date",
        "hotel_booked_date",
        "agency_booked_date",
        "entered_on",
        mode="before",
    )
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        return value

    @property
    def full_name(self) -> str:
        """First and last name, or a polite placeholder."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or "Valued Customer"

    @property
    def display_name(self) -> str:
        """First and last name without the placeholder."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def has_travel_rep(self) -> bool:
        return bool(self.travel_rep and self.travel_rep.strip())

    def formatted_phone(self, fallback: str = "") -> str:
        """Primary phone in +1 form, or the fallback when none is on file."""
        return f"+1{self.phone1}" if self.phone1 else fallback


class PackageInfo(BaseModel):
    """Deposit requirements and descriptive fields for a package code."""

    pkgcode2: str = Field(..., description="Uppercased package code")
    ref_dep: float = Field(default=0, description="Refundable deposit required")
    deposit: float = Field(default=0, description="Tax/confirmation deposit required")
    destination: str | None = Field(default=None)
    nights: int | float | str | None = Field(default=None)
    vacation_type: str | None = Field(default=None)
    vaca_desc: str | None = Field(default=None, description="Package description")

    @property
    def total_expected(self) -> float:
        return self.ref_dep + self.deposit

    @classmethod
    def from_row(cls, code: str, row: dict[str, Any]) -> "PackageInfo":
        """Build from a package table row, falling back across alternate column names."""
        return cls(
            pkgcode2=code,
            ref_dep=row.get("ref_dep") or 0,
            deposit=row.get("deposit") or 0,
            destination=row.get("destination") or row.get("dest") or None,
            nights=row.get("ngts") or row.get("nights") or None,
            vacation_type=row.get("vacation_type") or None,
            vaca_desc=row.get("vaca_desc") or None,
        )


class DepositSummary(BaseModel):
    """Paid versus required deposits."""

    status: str = Field(..., description="'complete' or 'pending'")
    val_dep_paid: float = 0
    conf_deposit_paid: float = 0
    total_paid: float = 0
    refundable_deposit_required: float | None = None
    tax_deposit_required: float | None = None
    expected_deposit: float | None = None
    remaining: float | None = None
    complete: bool = False


class StatusResult(BaseModel):
    """Outcome of the status decision list for one customer."""

    status: Status
    status_label: str
    agent_message: str
    deposits: DepositSummary
    days_until_travel: int | None = None
    is_online_scheduling: bool = False
    is_phone_scheduling: bool = False
