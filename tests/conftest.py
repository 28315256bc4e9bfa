"""Pytest configuration and shared fixtures."""

from datetime import date
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from bestagent.api.app import create_app
from bestagent.api.service import CustomerStatusService, build_service
from bestagent.caspio.auth import TokenCache
from bestagent.caspio.client import CaspioClient
from bestagent.config import Settings
from bestagent.core.models import CustomerRecord, PackageInfo

TODAY = date(2026, 3, 1)


def make_customer(**fields: Any) -> CustomerRecord:
    """Build a customer record from Caspio column names."""
    row = {"vac_id": 1001, "p1F": "Jane", "p1L": "Doe", "pkg_code2": "XX"}
    row.update(fields)
    return CustomerRecord.model_validate(row)


def make_package(code: str = "XX", ref_dep: float = 0, deposit: float = 0) -> PackageInfo:
    return PackageInfo(pkgcode2=code, ref_dep=ref_dep, deposit=deposit)


def _matches(record: dict[str, Any], where: str | None) -> bool:
    """Evaluate the field=value OR field=value clauses the client sends."""
    if not where:
        return True
    for clause in where.split(" OR "):
        field, _, raw = clause.partition("=")
        if raw.startswith("'") and raw.endswith("'"):
            value = raw[1:-1].replace("''", "'")
        else:
            value = raw
        if str(record.get(field, "")) == value:
            return True
    return False


class FakeCaspio:
    """In-memory stand-in for the Caspio token and records endpoints."""

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {"RIMS_DATA": [], "destsel": []}
        self.token_requests = 0
        self.queries: list[dict[str, Any]] = []
        self.auth_status = 200
        self.failing_tables: set[str] = set()
        # Tables that answer 200 with an HTML maintenance page
        self.maintenance_tables: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path == "/oauth/token":
            self.token_requests += 1
            if self.auth_status != 200:
                return httpx.Response(self.auth_status, json={"error": "invalid_client"})
            return httpx.Response(
                200,
                json={"access_token": f"token-{self.token_requests}", "expires_in": 86400},
            )

        if path.startswith("/rest/v2/tables/") and path.endswith("/records"):
            table = path.split("/")[4]
            where = request.url.params.get("q.where")
            self.queries.append({
                "table": table,
                "where": where,
                "page_size": request.url.params.get("q.pageSize"),
                "authorization": request.headers.get("Authorization"),
            })
            if table in self.failing_tables:
                return httpx.Response(500, json={"Message": "Internal error"})
            if table in self.maintenance_tables:
                return httpx.Response(200, text="<html>maintenance</html>")
            rows = [row for row in self.tables.get(table, []) if _matches(row, where)]
            return httpx.Response(200, json={"Result": rows})

        return httpx.Response(404, json={"Message": "Not found"})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        caspio_account_id="acme",
        caspio_client_id="client-id",
        caspio_client_secret="client-secret",
        log_level="DEBUG",
    )


@pytest.fixture
def fake_caspio() -> FakeCaspio:
    return FakeCaspio()


@pytest.fixture
def http_client(fake_caspio: FakeCaspio):
    client = httpx.Client(transport=httpx.MockTransport(fake_caspio.handler))
    yield client
    client.close()


@pytest.fixture
def token_cache(settings: Settings, http_client: httpx.Client) -> TokenCache:
    return TokenCache(
        token_url=settings.token_url,
        client_id=settings.caspio_client_id,
        client_secret=settings.caspio_client_secret,
        http_client=http_client,
    )


@pytest.fixture
def caspio_client(
    settings: Settings, token_cache: TokenCache, http_client: httpx.Client
) -> CaspioClient:
    return CaspioClient(settings.base_url, token_cache, http_client)


@pytest.fixture
def service(settings: Settings, http_client: httpx.Client) -> CustomerStatusService:
    return build_service(settings, http_client)


@pytest.fixture
def client(settings: Settings, service: CustomerStatusService) -> TestClient:
    app = create_app(settings, service=service)
    return TestClient(app, raise_server_exceptions=False)
