"""Custom exceptions for the Best Agent API."""


class BestAgentError(Exception):
    """Base exception for Best Agent API errors."""

    pass


class ConfigurationError(BestAgentError):
    """Invalid configuration value."""

    pass


class AuthError(BestAgentError):
    """Error exchanging client credentials for a Caspio bearer token."""

    pass


class QueryError(BestAgentError):
    """Error querying a Caspio table."""

    pass


class InvalidFilterError(BestAgentError, ValueError):
    """A filter field or value cannot be rendered into a where clause."""

    pass
