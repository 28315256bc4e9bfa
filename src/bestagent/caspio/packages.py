"""Package code lookup against the package definitions table."""

import logging

from pydantic import ValidationError

from bestagent.caspio.client import CaspioClient
from bestagent.caspio.filters import equals
from bestagent.core.models import PackageInfo
from bestagent.utils.exceptions import BestAgentError

logger = logging.getLogger(__name__)


class PackageLookup:
    """Resolves package codes to deposit requirements."""

    def __init__(self, client: CaspioClient, table: str = "destsel"):
        self.client = client
        self.table = table

    def resolve(self, code: str | None) -> PackageInfo | None:
        """Look up a package by code.

        Failures are logged and reported as "no package info" so a broken
        lookup never fails the caller's status request.

        Args:
            code: Package code (case-insensitive)

        Returns:
            PackageInfo, or None when unknown or the lookup failed
        """
        if not code:
            return None

        code = code.upper()
        logger.info("Looking up package %s", code)

        try:
            results = self.client.query(self.table, equals("pkgcode2", code))
            if not results:
                return None
            return PackageInfo.from_row(code, results[0])
        except (BestAgentError, ValidationError) as e:
            logger.error("Package lookup for %s failed: %s", code, e)
            return None
