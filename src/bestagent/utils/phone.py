"""Caller phone number normalization."""

import logging
import re

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def clean_phone(phone: str | None) -> str:
    """Reduce a caller-supplied phone string to its national digits.

    Every non-digit is removed, then a leading ``1`` country code is dropped
    from 11-digit results. No length validation is performed.

    Examples:
        >>> clean_phone("+1 (805) 555-1234")
        '8055551234'
        >>> clean_phone("805-555-1234")
        '8055551234'
    """
    if not phone:
        return ""

    cleaned = _NON_DIGITS.sub("", str(phone))
    if len(cleaned) == 11 and cleaned.startswith("1"):
        cleaned = cleaned[1:]

    logger.debug("Cleaned phone %r -> %r", phone, cleaned)
    return cleaned
