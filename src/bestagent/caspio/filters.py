"""Parameterized construction of Caspio ``q.where`` clauses.

Values are never interpolated raw: integers are rendered as literals and
strings are quoted with embedded quotes doubled, the SQL way.
"""

import re
from typing import Any

from bestagent.utils.exceptions import InvalidFilterError

# Caspio field names: letters, digits and underscores
FIELD_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class Where:
    """A rendered where clause, safe to send as ``q.where``."""

    def __init__(self, expression: str):
        self._expression = expression

    def __str__(self) -> str:
        return self._expression

    def __repr__(self) -> str:
        return f"Where({self._expression!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Where) and other._expression == self._expression

    def __hash__(self) -> int:
        return hash(self._expression)

    def __or__(self, other: "Where") -> "Where":
        return any_of(self, other)


def render_value(value: Any) -> str:
    """Render a filter value as a Caspio literal.

    Raises:
        InvalidFilterError: If the value type cannot be rendered safely
    """
    if isinstance(value, bool):
        raise InvalidFilterError("Boolean filter values are not supported")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    raise InvalidFilterError(f"Unsupported filter value type: {type(value).__name__}")


def equals(field: str, value: Any) -> Where:
    """Build ``field=value``."""
    if not FIELD_PATTERN.fullmatch(field):
        raise InvalidFilterError(f"Invalid field name: {field!r}")
    return Where(f"{field}={render_value(value)}")


def any_of(*clauses: Where) -> Where:
    """Join clauses with OR."""
    if not clauses:
        raise InvalidFilterError("any_of() needs at least one clause")
    return Where(" OR ".join(str(clause) for clause in clauses))


def parse_account_id(value: Any) -> int:
    """Coerce a caller-supplied account ID to an integer.

    Raises:
        InvalidFilterError: If the value is not a whole number
    """
    if isinstance(value, bool):
        raise InvalidFilterError(f"Invalid vac_id: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise InvalidFilterError(f"Invalid vac_id: {value!r}")
