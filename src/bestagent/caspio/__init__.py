"""Caspio REST API access: authentication, queries and package lookup."""

from bestagent.caspio.auth import TokenCache
from bestagent.caspio.client import CaspioClient
from bestagent.caspio.filters import Where, any_of, equals, parse_account_id
from bestagent.caspio.packages import PackageLookup

__all__ = [
    "TokenCache",
    "CaspioClient",
    "PackageLookup",
    "Where",
    "equals",
    "any_of",
    "parse_account_id",
]
