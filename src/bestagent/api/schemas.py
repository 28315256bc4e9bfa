"""Request and response models for the voice-agent endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from bestagent.core.models import CustomerRecord, DepositSummary, PackageInfo, StatusResult


# =============================================================================
# Requests
# =============================================================================

class StatusByIdRequest(BaseModel):
    """Status lookup for a record the caller has already picked."""

    vac_id: int | str | None = Field(default=None, description="Account identifier")
    pkg_code2: str | None = Field(
        default=None, description="Package code to use when the record has none"
    )


class PhoneLookupRequest(BaseModel):
    phone_number: str | int | None = Field(default=None, description="Caller phone number")


class RimsStatusRequest(BaseModel):
    """Status lookup by account identifier, or by phone when no ID is known."""

    vac_id: int | str | None = Field(default=None, description="Account identifier")
    phone_number: str | int | None = Field(default=None, description="Caller phone number")
    pkg_code2: str | None = Field(
        default=None, description="Package code to use when the record has none"
    )


class MemoRequest(BaseModel):
    vac_id: int | str | None = None
    memo_type: str | None = None
    details: str | None = None


# =============================================================================
# Responses
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    timestamp: str = Field(..., description="ISO 8601 server time")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")


class CustomerSummary(BaseModel):
    full_name: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    vac_id: int | None = None
    pkg_code2: str | None = None
    destination: str | None = None
    travel_date: str | None = None
    days_until_travel: int | None = None
    travel_rep_name: str | None = None


class PackageSummary(BaseModel):
    description: str | None = None
    destination: str | None = None
    nights: int | float | str | None = None
    vacation_type: str | None = None


class StatusPayload(BaseModel):
    """Full status for a single customer record."""

    found: bool = True
    status: str
    status_label: str
    agent_message: str
    customer: CustomerSummary
    deposits: DepositSummary
    package: PackageSummary | None = None
    is_online_scheduling: bool = False
    is_phone_scheduling: bool = False
    is_business_hours: bool = False


class StatusDetails(BaseModel):
    deposits: DepositSummary


class RimsStatusPayload(StatusPayload):
    """Status payload for the RIMS-compatible flow, which also nests deposits."""

    details: StatusDetails


class RecordChoice(BaseModel):
    index: int
    vac_id: int | None = None
    pkg_code2: str | None = None
    destination: str | None = None
    full_name: str
    val_entered_on: str | None = None


class CallerSummary(BaseModel):
    full_name: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class MostRecentRecord(BaseModel):
    vac_id: int | None = None
    pkg_code2: str | None = None
    destination: str | None = None


class VerificationPayload(BaseModel):
    """Returned when several records share the caller's phone number."""

    found: bool = True
    multiple_records: bool = True
    record_count: int
    status: str = "verification_needed"
    status_label: str = "Multiple Packages"
    agent_message: str
    customer: CallerSummary
    all_records: list[RecordChoice]
    most_recent: MostRecentRecord
    is_business_hours: bool = False


class LookupFailure(BaseModel):
    """A lookup that found nothing or failed; unset fields are omitted."""

    found: bool = False
    status: str | None = None
    status_label: str | None = None
    agent_message: str | None = None
    error: str | None = None
    message: str | None = None
    is_business_hours: bool | None = None

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class PhoneRecord(BaseModel):
    vac_id: int | None = None
    name: str = ""
    pkg_code2: str | None = None
    destination: str | None = None


class PhoneLookupCustomer(PhoneRecord):
    phone: str | None = None


class PhoneLookupPayload(BaseModel):
    found: bool = True
    customer: PhoneLookupCustomer
    all_records: list[PhoneRecord]


class MemoAck(BaseModel):
    success: bool = True
    message: str = "Memo logged"
    vac_id: int | str | None = None
    memo_type: str | None = None
    details: str | None = None
    timestamp: str


# =============================================================================
# Builders
# =============================================================================

def summarize_customer(
    customer: CustomerRecord, result: StatusResult, phone_fallback: str = ""
) -> CustomerSummary:
    return CustomerSummary(
        full_name=customer.full_name,
        first_name=customer.first_name or "",
        last_name=customer.last_name or "",
        email=customer.email or "",
        phone=customer.formatted_phone(phone_fallback),
        vac_id=customer.vac_id,
        pkg_code2=customer.pkg_code2,
        destination=customer.destination,
        travel_date=customer.travel_date or None,
        days_until_travel=result.days_until_travel,
        travel_rep_name=customer.travel_rep or None,
    )


def summarize_package(package: PackageInfo | None) -> PackageSummary | None:
    if package is None:
        return None
    return PackageSummary(
        description=package.vaca_desc,
        destination=package.destination,
        nights=package.nights,
        vacation_type=package.vacation_type,
    )


def build_status_payload(
    customer: CustomerRecord,
    result: StatusResult,
    package: PackageInfo | None,
    is_business_hours: bool,
    phone_fallback: str = "",
    with_details: bool = False,
) -> dict[str, Any]:
    """Shape a status evaluation into the response the voice agent reads."""
    fields: dict[str, Any] = {
        "status": result.status.value,
        "status_label": result.status_label,
        "agent_message": result.agent_message,
        "customer": summarize_customer(customer, result, phone_fallback),
        "deposits": result.deposits,
        "package": summarize_package(package),
        "is_online_scheduling": result.is_online_scheduling,
        "is_phone_scheduling": result.is_phone_scheduling,
        "is_business_hours": is_business_hours,
    }
    if with_details:
        payload: StatusPayload = RimsStatusPayload(
            **fields, details=StatusDetails(deposits=result.deposits)
        )
    else:
        payload = StatusPayload(**fields)
    return payload.model_dump(mode="json")


def build_verification_payload(
    customers: list[CustomerRecord], phone_fallback: str, is_business_hours: bool
) -> dict[str, Any]:
    """Ask the caller which package they mean; ``customers`` is newest first."""
    most_recent = customers[0]
    payload = VerificationPayload(
        record_count=len(customers),
        agent_message=(
            "Are you calling about your package to "
            f"{most_recent.destination or 'your vacation'}?"
        ),
        customer=CallerSummary(
            full_name=most_recent.full_name,
            first_name=most_recent.first_name or "",
            last_name=most_recent.last_name or "",
            phone=most_recent.formatted_phone(phone_fallback),
        ),
        all_records=[
            RecordChoice(
                index=index,
                vac_id=record.vac_id,
                pkg_code2=record.pkg_code2,
                destination=record.destination,
                full_name=record.full_name,
                val_entered_on=record.entered_on,
            )
            for index, record in enumerate(customers)
        ],
        most_recent=MostRecentRecord(
            vac_id=most_recent.vac_id,
            pkg_code2=most_recent.pkg_code2,
            destination=most_recent.destination,
        ),
        is_business_hours=is_business_hours,
    )
    return payload.model_dump(mode="json")


def build_phone_lookup_payload(customers: list[CustomerRecord]) -> dict[str, Any]:
    """List every record for a phone number; ``customers`` is newest first."""
    first = customers[0]
    payload = PhoneLookupPayload(
        customer=PhoneLookupCustomer(
            vac_id=first.vac_id,
            name=first.display_name,
            pkg_code2=first.pkg_code2,
            destination=first.destination,
            phone=first.phone1,
        ),
        all_records=[
            PhoneRecord(
                vac_id=record.vac_id,
                name=record.display_name,
                pkg_code2=record.pkg_code2,
                destination=record.destination,
            )
            for record in customers
        ],
    )
    return payload.model_dump(mode="json")
