"""Utility functions and exceptions."""

from bestagent.utils.exceptions import (
    AuthError,
    BestAgentError,
    ConfigurationError,
    InvalidFilterError,
    QueryError,
)

__all__ = [
    "BestAgentError",
    "ConfigurationError",
    "AuthError",
    "QueryError",
    "InvalidFilterError",
]
