"""Status decision list mapping a customer and package to an agent script line.

The rules are evaluated top to bottom and the first match wins, so their
order carries meaning: a customer whose final documents are out is
"Trip Complete" even if their booking dates would also put them in
"Travel Pending".
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from bestagent.core.models import (
    CustomerRecord,
    DepositSummary,
    PackageInfo,
    Status,
    StatusResult,
)
from bestagent.utils.dates import days_until_date

logger = logging.getLogger(__name__)

# Customers on these packages schedule and pay at activatemytrip.com
ONLINE_SCHEDULING_PACKAGES = frozenset({"ECRA", "ECRB", "ECRD", "EKCA"})

# Customers on these packages call in to schedule and pay the deposit
PHONE_SCHEDULING_PACKAGES = frozenset({"EM", "ES"})
PHONE_SCHEDULING_PREFIXES = ("EX", "EZ")

CONFIRMED_CODE = "CONFIRM"
TRIP_COMPLETE_AFTER_DAYS = -7
TRAVEL_PENDING_WINDOW_DAYS = 14
BOOKING_PENDING_WINDOW_DAYS = 45
TRAVEL_REP_WINDOW_DAYS = 75


class Channel(str, Enum):
    """How a customer schedules travel dates and pays the deposit."""

    ONLINE = "online"
    PHONE = "phone"
    NONE = "none"


def is_online_scheduling_package(pkg_code: str | None) -> bool:
    return bool(pkg_code) and pkg_code.upper() in ONLINE_SCHEDULING_PACKAGES


def is_phone_scheduling_package(pkg_code: str | None) -> bool:
    if not pkg_code:
        return False
    code = pkg_code.upper()
    return code in PHONE_SCHEDULING_PACKAGES or code.startswith(PHONE_SCHEDULING_PREFIXES)


def classify_channel(pkg_code: str | None) -> Channel:
    """Pick the scheduling channel; the online list takes precedence."""
    if is_online_scheduling_package(pkg_code):
        return Channel.ONLINE
    if is_phone_scheduling_package(pkg_code):
        return Channel.PHONE
    return Channel.NONE


def reconcile_deposits(
    customer: CustomerRecord, package: PackageInfo | None
) -> DepositSummary:
    """Compare what the customer has paid with what the package requires.

    Completion is decided in order:

    1. The combined payments cover the package total.
    2. The package requires a single deposit and either paid field alone
       covers it (customers sometimes pay into the other bucket).
    3. No package is known, and any deposit at all has been paid.

    Args:
        customer: Customer record with the two paid-deposit fields
        package: Package requirements, or None when the code has no match

    Returns:
        DepositSummary with paid, required and remaining amounts
    """
    paid_val = customer.validated_deposit or 0
    paid_conf = customer.confirmation_deposit or 0
    total_paid = paid_val + paid_conf

    if package is not None:
        required_ref = package.ref_dep
        required_conf = package.deposit
        expected = package.total_expected

        if total_paid >= expected:
            complete = True
        elif required_ref > 0 and required_conf == 0:
            complete = paid_val >= required_ref or paid_conf >= required_ref
        elif required_conf > 0 and required_ref == 0:
            complete = paid_val >= required_conf or paid_conf >= required_conf
        else:
            complete = False
        remaining = max(0, expected - total_paid)
    else:
        expected = None
        remaining = None
        complete = paid_val > 0 or paid_conf > 0

    return DepositSummary(
        status="complete" if complete else "pending",
        val_dep_paid=paid_val,
        conf_deposit_paid=paid_conf,
        total_paid=total_paid,
        refundable_deposit_required=(package.ref_dep or None) if package else None,
        tax_deposit_required=(package.deposit or None) if package else None,
        expected_deposit=expected,
        remaining=remaining,
        complete=complete,
    )


@dataclass(frozen=True)
class Facts:
    """Everything the rules look at for one evaluation."""

    customer: CustomerRecord
    deposits: DepositSummary
    days_until_travel: int | None
    channel: Channel

    @property
    def has_travel_date(self) -> bool:
        return bool(self.customer.travel_date)

    @property
    def deposits_complete(self) -> bool:
        return self.deposits.complete

    @property
    def confirmed(self) -> bool:
        return self.customer.confirmation_code == CONFIRMED_CODE

    def travel_within(self, days: int) -> bool:
        return self.days_until_travel is not None and self.days_until_travel <= days

    def travel_beyond(self, days: int) -> bool:
        return self.days_until_travel is not None and self.days_until_travel > days


@dataclass(frozen=True)
class StatusRule:
    """One entry of the decision list."""

    status: Status
    label: str
    applies: Callable[[Facts], bool]
    message: Callable[[Facts], str]


def _fixed(text: str) -> Callable[[Facts], str]:
    return lambda facts: text


def _by_channel(online: str, phone: str, default: str) -> Callable[[Facts], str]:
    variants = {Channel.ONLINE: online, Channel.PHONE: phone, Channel.NONE: default}
    return lambda facts: variants[facts.channel]


def _is_refund_pending(facts: Facts) -> bool:
    customer = facts.customer
    return bool(customer.cash_back_amount and customer.cash_back_amount > 0) and not (
        customer.final_doc_date
    )


def _is_trip_complete(facts: Facts) -> bool:
    if facts.customer.final_doc_date:
        return True
    return (
        facts.days_until_travel is not None
        and facts.days_until_travel < TRIP_COMPLETE_AFTER_DAYS
    )


def _is_travel_pending(facts: Facts) -> bool:
    customer = facts.customer
    return (
        bool(customer.hotel_booked_date and customer.agency_booked_date)
        and facts.travel_within(TRAVEL_PENDING_WINDOW_DAYS)
        and facts.days_until_travel >= 0
    )


def _is_booking_pending(facts: Facts) -> bool:
    return bool(facts.customer.itinerary_print_date) and facts.travel_within(
        BOOKING_PENDING_WINDOW_DAYS
    )


def _is_travel_rep_assigned(facts: Facts) -> bool:
    return facts.customer.has_travel_rep and facts.travel_within(TRAVEL_REP_WINDOW_DAYS)


def _is_waiting_for_travel_rep(facts: Facts) -> bool:
    return (
        facts.deposits_complete
        and facts.has_travel_date
        and not facts.customer.has_travel_rep
        and facts.travel_within(TRAVEL_REP_WINDOW_DAYS)
    )


def _is_ready_to_schedule(facts: Facts) -> bool:
    return facts.deposits_complete and not facts.has_travel_date


def _is_dates_scheduled(facts: Facts) -> bool:
    return (
        facts.deposits_complete
        and facts.has_travel_date
        and not facts.customer.has_travel_rep
        and facts.confirmed
        and facts.travel_beyond(TRAVEL_REP_WINDOW_DAYS)
    )


def _is_scheduled_unconfirmed(facts: Facts) -> bool:
    return (
        facts.has_travel_date
        and not facts.confirmed
        and facts.customer.decision_ready is not True
    )


def _must_reschedule(facts: Facts) -> bool:
    return _is_scheduled_unconfirmed(facts) and facts.travel_within(TRAVEL_REP_WINDOW_DAYS)


def _can_confirm(facts: Facts) -> bool:
    # An unparseable travel date has no day count and lands here
    return _is_scheduled_unconfirmed(facts) and not facts.travel_within(
        TRAVEL_REP_WINDOW_DAYS
    )


RULES: tuple[StatusRule, ...] = (
    StatusRule(
        Status.REFUND_PENDING,
        "Refund Pending",
        _is_refund_pending,
        _fixed("I see there is a pending matter on your account."),
    ),
    StatusRule(
        Status.TRIP_COMPLETE,
        "Trip Complete",
        _is_trip_complete,
        _fixed("I can see you have already traveled with us."),
    ),
    StatusRule(
        Status.TRAVEL_PENDING,
        "Travel Pending",
        _is_travel_pending,
        _fixed("Your trip is all booked and your itinerary should have been sent."),
    ),
    StatusRule(
        Status.BOOKING_PENDING,
        "Booking Pending",
        _is_booking_pending,
        _fixed(
            "Your booking is being finalized. Expect a call from our booking agent "
            "7-14 days before your trip."
        ),
    ),
    StatusRule(
        Status.TRAVEL_REP_ASSIGNED,
        "Travel Rep Assigned",
        _is_travel_rep_assigned,
        _fixed(
            "Your travel rep has been assigned. Be sure to answer calls from the "
            "805 area code."
        ),
    ),
    StatusRule(
        Status.WAITING_FOR_TRAVEL_REP,
        "Waiting for Travel Rep",
        _is_waiting_for_travel_rep,
        _fixed(
            "Your travel dates are set and you are waiting for a travel rep to be "
            "assigned."
        ),
    ),
    StatusRule(
        Status.READY_TO_SCHEDULE,
        "Ready to Schedule",
        _is_ready_to_schedule,
        _by_channel(
            online=(
                "Great news! Your deposit is all paid up and you are ready to select "
                "your travel dates. You can login to your activatemytrip.com account "
                "to select your dates."
            ),
            phone=(
                "Great news! Your deposit is all paid up and you are ready to select "
                "your travel dates. Would you like me to transfer you to scheduling?"
            ),
            default=(
                "Great news! Your deposit is all paid up and you are ready to select "
                "your travel dates."
            ),
        ),
    ),
    StatusRule(
        Status.DATES_SCHEDULED,
        "Dates Scheduled",
        _is_dates_scheduled,
        lambda facts: (
            f"Your travel dates are all set for {facts.customer.travel_date}. "
            "A travel rep will be assigned 45-75 days before your trip."
        ),
    ),
    StatusRule(
        Status.MUST_RESCHEDULE,
        "Needs Rescheduling",
        _must_reschedule,
        _fixed(
            "Your scheduled dates may no longer be available. Would you like me to "
            "transfer you to reschedule?"
        ),
    ),
    StatusRule(
        Status.CAN_CONFIRM,
        "Needs Confirmation",
        _can_confirm,
        _fixed(
            "Your dates are scheduled but not yet confirmed. Would you like me to "
            "transfer you to confirm?"
        ),
    ),
)

DEFAULT_RULE = StatusRule(
    Status.DEPOSIT_NEEDED,
    "Deposit Needed",
    lambda facts: True,
    _by_channel(
        online=(
            "I see you have activated your vacation package. You can login to your "
            "activatemytrip.com account to select your travel dates and pay your "
            "deposit with a credit card."
        ),
        phone=(
            "I see you have activated your vacation package. Would you like me to "
            "transfer you to scheduling so you can select your dates and pay the "
            "deposit over the phone?"
        ),
        default=(
            "I see you have activated your vacation package. It looks like we are "
            "just waiting on your deposit."
        ),
    ),
)


def select_rule(facts: Facts) -> StatusRule:
    """Return the first rule whose condition holds, or the default rule."""
    for rule in RULES:
        if rule.applies(facts):
            return rule
    return DEFAULT_RULE


def determine_status(
    customer: CustomerRecord,
    package: PackageInfo | None,
    today: date | None = None,
) -> StatusResult:
    """Classify a customer's lifecycle stage and pick the agent script line.

    Args:
        customer: Customer record as read from the customer table
        package: Package requirements, or None when unknown
        today: Reference date for day counts (defaults to the local date)

    Returns:
        StatusResult with the status, script line and deposit breakdown
    """
    pkg_code = customer.pkg_code2
    facts = Facts(
        customer=customer,
        deposits=reconcile_deposits(customer, package),
        days_until_travel=(
            days_until_date(customer.travel_date, today) if customer.travel_date else None
        ),
        channel=classify_channel(pkg_code),
    )

    rule = select_rule(facts)
    if rule.status is Status.CAN_CONFIRM and facts.days_until_travel is None:
        logger.warning(
            "Unparseable travel date %r for vac_id %s; treating as outside the rep window",
            customer.travel_date,
            customer.vac_id,
        )

    return StatusResult(
        status=rule.status,
        status_label=rule.label,
        agent_message=rule.message(facts),
        deposits=facts.deposits,
        days_until_travel=facts.days_until_travel,
        is_online_scheduling=is_online_scheduling_package(pkg_code),
        is_phone_scheduling=is_phone_scheduling_package(pkg_code),
    )
