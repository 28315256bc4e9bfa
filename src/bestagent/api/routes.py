"""HTTP endpoints called by the voice-agent platform.

Lookup failures never surface as HTTP errors: the agent always gets a
``200`` with ``found: false`` and something it can say to the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from bestagent.api.schemas import (
    HealthResponse,
    LookupFailure,
    MemoAck,
    MemoRequest,
    PhoneLookupRequest,
    RimsStatusRequest,
    StatusByIdRequest,
    build_phone_lookup_payload,
    build_status_payload,
    build_verification_payload,
)
from bestagent.api.service import CustomerStatusService
from bestagent.utils.exceptions import BestAgentError
from bestagent.utils.phone import clean_phone

logger = logging.getLogger(__name__)

router = APIRouter()

FALLBACK_AGENT_MESSAGE = "I had trouble looking up your account. How can I help you today?"

# Errors a lookup is allowed to fail with; anything else is a bug and gets a 500
LOOKUP_ERRORS = (BestAgentError, ValidationError)


def get_service(request: Request) -> CustomerStatusService:
    return request.app.state.service


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(request: Request):
    """Liveness check; does not touch Caspio."""
    settings = request.app.state.settings
    return HealthResponse(
        status="healthy",
        timestamp=_utc_now(),
        service=settings.service_name,
        version=settings.version,
    )


@router.get(
    "/api/customer/status",
    tags=["Status"],
    summary="Caller ID status lookup",
)
def customer_status(
    phone: str | None = Query(default=None, description="Caller phone number"),
    service: CustomerStatusService = Depends(get_service),
) -> dict[str, Any]:
    """Look up the caller by phone and return their status and script line.

    Several records on one phone number return a verification prompt
    instead; the agent follows up with ``POST /api/customer/status-by-id``.
    """
    if not phone:
        return LookupFailure(
            status="unknown", agent_message="No phone number provided"
        ).to_response()

    phone_clean = clean_phone(phone)
    logger.info("Status lookup for phone %s (raw %r)", phone_clean, phone)

    try:
        customers = service.find_by_phone(phone)

        if not customers:
            logger.info("Customer not found: %s", phone_clean)
            return LookupFailure(
                status="unknown",
                status_label="Unknown Caller",
                agent_message="Customer not found in our system",
                is_business_hours=service.is_business_hours(),
            ).to_response()

        if len(customers) > 1:
            logger.info("Found %d records for %s", len(customers), phone_clean)
            return build_verification_payload(
                customers, phone, service.is_business_hours()
            )

        customer = customers[0]
        result, package = service.evaluate(customer)
        return build_status_payload(
            customer,
            result,
            package,
            is_business_hours=service.is_business_hours(),
            phone_fallback=phone,
        )

    except LOOKUP_ERRORS as e:
        logger.error("Status lookup failed: %s", e)
        return LookupFailure(
            status="error",
            status_label="Error",
            agent_message=FALLBACK_AGENT_MESSAGE,
            is_business_hours=service.is_business_hours(),
        ).to_response()


@router.post(
    "/api/customer/status-by-id",
    tags=["Status"],
    summary="Status for a verified account",
)
def customer_status_by_id(
    request: StatusByIdRequest,
    service: CustomerStatusService = Depends(get_service),
) -> dict[str, Any]:
    """Return the status of the record the caller confirmed."""
    if request.vac_id is None or request.vac_id == "":
        return LookupFailure(error="vac_id is required").to_response()

    logger.info("Status lookup for vac_id %s", request.vac_id)

    try:
        customer = service.find_by_account(request.vac_id)
        if customer is None:
            return LookupFailure(error="Customer not found").to_response()

        result, package = service.evaluate(customer, request.pkg_code2)
        return build_status_payload(
            customer, result, package, is_business_hours=service.is_business_hours()
        )

    except LOOKUP_ERRORS as e:
        logger.error("Status lookup for vac_id %s failed: %s", request.vac_id, e)
        return LookupFailure(error=str(e)).to_response()


@router.post(
    "/api/rims/phone-lookup",
    tags=["RIMS"],
    summary="List records for a phone number",
)
def phone_lookup(
    request: PhoneLookupRequest,
    service: CustomerStatusService = Depends(get_service),
) -> dict[str, Any]:
    """Return the newest record and all records for a phone, without status."""
    if not request.phone_number:
        return LookupFailure(message="Phone number required").to_response()

    phone_clean = clean_phone(str(request.phone_number))
    logger.info("Phone lookup for %s", phone_clean)

    try:
        customers = service.find_by_phone(str(request.phone_number))
        if not customers:
            return LookupFailure(message="Customer not found").to_response()
        return build_phone_lookup_payload(customers)

    except LOOKUP_ERRORS as e:
        logger.error("Phone lookup failed: %s", e)
        return LookupFailure(error=str(e)).to_response()


@router.post(
    "/api/rims/customer-status",
    tags=["RIMS"],
    summary="Status by account ID or phone number",
)
def rims_customer_status(
    request: RimsStatusRequest,
    service: CustomerStatusService = Depends(get_service),
) -> dict[str, Any]:
    """Return the status of an account, preferring ``vac_id`` over phone.

    When only a phone is given, the newest matching record is used.
    """
    has_vac_id = request.vac_id is not None and request.vac_id != ""
    if not has_vac_id and not request.phone_number:
        return LookupFailure(error="vac_id or phone_number required").to_response()

    logger.info(
        "RIMS status lookup for vac_id %s, pkg_code2 %s", request.vac_id, request.pkg_code2
    )

    try:
        if has_vac_id:
            customer = service.find_by_account(request.vac_id)
        else:
            customers = service.find_by_phone(str(request.phone_number))
            customer = customers[0] if customers else None

        if customer is None:
            return LookupFailure(message="Customer not found").to_response()

        result, package = service.evaluate(customer, request.pkg_code2)
        return build_status_payload(
            customer,
            result,
            package,
            is_business_hours=service.is_business_hours(),
            with_details=True,
        )

    except LOOKUP_ERRORS as e:
        logger.error("RIMS status lookup failed: %s", e)
        return LookupFailure(error=str(e)).to_response()


@router.post(
    "/api/memos/create",
    response_model=MemoAck,
    tags=["Memos"],
    summary="Record a call memo",
)
def create_memo(request: MemoRequest):
    """Acknowledge a memo. Memos are logged, not written to Caspio."""
    logger.info(
        "Memo for vac_id %s, type %s: %s",
        request.vac_id,
        request.memo_type,
        request.details,
    )
    return MemoAck(
        vac_id=request.vac_id,
        memo_type=request.memo_type,
        details=request.details,
        timestamp=_utc_now(),
    )
