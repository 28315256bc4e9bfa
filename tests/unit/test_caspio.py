"""Unit tests for the Caspio token cache, client and package lookup."""

import httpx
import pytest

from bestagent.caspio.auth import TokenCache
from bestagent.caspio.client import CaspioClient
from bestagent.caspio.filters import equals
from bestagent.caspio.packages import PackageLookup
from bestagent.utils.exceptions import AuthError, QueryError


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTokenCache:
    """Tests for TokenCache."""

    def test_first_call_exchanges_credentials(self, token_cache, fake_caspio):
        assert token_cache.get_token() == "token-1"
        assert fake_caspio.token_requests == 1

    def test_token_is_reused_until_expiry(self, token_cache, fake_caspio):
        token_cache.get_token()
        token_cache.get_token()
        assert fake_caspio.token_requests == 1

    def test_refresh_after_expiry_margin(self, settings, http_client, fake_caspio):
        clock = FakeClock()
        cache = TokenCache(
            settings.token_url, "id", "secret", http_client, expiry_margin=60, clock=clock
        )
        assert cache.get_token() == "token-1"

        clock.now += 86400 - 61
        assert cache.get_token() == "token-1"

        clock.now += 1
        assert cache.get_token() == "token-2"
        assert fake_caspio.token_requests == 2

    def test_invalidate_forces_refresh(self, token_cache, fake_caspio):
        token_cache.get_token()
        token_cache.invalidate()
        assert token_cache.get_token() == "token-2"

    def test_sends_client_credentials_form(self, settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content.decode()
            seen["content_type"] = request.headers["Content-Type"]
            return httpx.Response(200, json={"access_token": "abc", "expires_in": 3600})

        with httpx.Client(transport=httpx.MockTransport(handler)) as http_client:
            cache = TokenCache(settings.token_url, "my-id", "my-secret", http_client)
            assert cache.get_token() == "abc"

        assert seen["content_type"] == "application/x-www-form-urlencoded"
        assert "grant_type=client_credentials" in seen["body"]
        assert "client_id=my-id" in seen["body"]
        assert "client_secret=my-secret" in seen["body"]

    def test_failed_exchange_raises(self, token_cache, fake_caspio):
        fake_caspio.auth_status = 401
        with pytest.raises(AuthError, match="401"):
            token_cache.get_token()

    def test_missing_credentials_raise_without_request(self, settings, http_client, fake_caspio):
        cache = TokenCache(settings.token_url, "", "", http_client)
        with pytest.raises(AuthError, match="not configured"):
            cache.get_token()
        assert fake_caspio.token_requests == 0

    def test_response_without_token_raises(self, settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        with httpx.Client(transport=transport) as http_client:
            cache = TokenCache(settings.token_url, "id", "secret", http_client)
            with pytest.raises(AuthError):
                cache.get_token()

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>maintenance</html>"),
            httpx.Response(200, json=["not", "a", "dict"]),
            httpx.Response(200, json={"access_token": "abc", "expires_in": "soon"}),
        ],
    )
    def test_malformed_response_raises_auth_error(self, settings, response):
        transport = httpx.MockTransport(lambda request: response)
        with httpx.Client(transport=transport) as http_client:
            cache = TokenCache(settings.token_url, "id", "secret", http_client)
            with pytest.raises(AuthError):
                cache.get_token()

    def test_transport_error_raises_auth_error(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as http_client:
            cache = TokenCache(settings.token_url, "id", "secret", http_client)
            with pytest.raises(AuthError):
                cache.get_token()


class TestCaspioClient:
    """Tests for CaspioClient.query."""

    def test_returns_matching_records(self, caspio_client, fake_caspio):
        fake_caspio.tables["RIMS_DATA"] = [{"vac_id": 1}, {"vac_id": 2}]
        assert caspio_client.query("RIMS_DATA", equals("vac_id", 2)) == [{"vac_id": 2}]

    def test_sends_bearer_token_and_page_size(self, caspio_client, fake_caspio):
        caspio_client.query("RIMS_DATA", equals("vac_id", 1))
        query = fake_caspio.queries[-1]
        assert query["authorization"] == "Bearer token-1"
        assert query["page_size"] == "100"
        assert query["where"] == "vac_id=1"

    def test_page_size_override(self, caspio_client, fake_caspio):
        caspio_client.query("RIMS_DATA", page_size=5)
        assert fake_caspio.queries[-1]["page_size"] == "5"
        assert fake_caspio.queries[-1]["where"] is None

    def test_where_clause_round_trips_through_query_string(self, caspio_client, fake_caspio):
        caspio_client.query("RIMS_DATA", equals("p1L", "O'Brien & Sons"))
        assert fake_caspio.queries[-1]["where"] == "p1L='O''Brien & Sons'"

    def test_missing_result_is_empty_list(self, settings, token_cache):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        with httpx.Client(transport=transport) as http_client:
            token_cache.get_token = lambda: "t"
            client = CaspioClient(settings.base_url, token_cache, http_client)
            assert client.query("RIMS_DATA") == []

    def test_non_json_reply_raises(self, caspio_client, fake_caspio):
        fake_caspio.maintenance_tables.add("RIMS_DATA")
        with pytest.raises(QueryError, match="invalid JSON"):
            caspio_client.query("RIMS_DATA")

    @pytest.mark.parametrize(
        "payload", [["row"], {"Result": {"vac_id": 1}}, {"Result": ["row"]}]
    )
    def test_unexpected_payload_raises(self, settings, token_cache, payload):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
        with httpx.Client(transport=transport) as http_client:
            token_cache.get_token = lambda: "t"
            client = CaspioClient(settings.base_url, token_cache, http_client)
            with pytest.raises(QueryError, match="unexpected payload"):
                client.query("RIMS_DATA")

    def test_failed_query_raises(self, caspio_client, fake_caspio):
        fake_caspio.failing_tables.add("RIMS_DATA")
        with pytest.raises(QueryError, match="500"):
            caspio_client.query("RIMS_DATA")

    def test_auth_failure_propagates(self, caspio_client, fake_caspio):
        fake_caspio.auth_status = 403
        with pytest.raises(AuthError):
            caspio_client.query("RIMS_DATA")


class TestPackageLookup:
    """Tests for PackageLookup.resolve."""

    @pytest.fixture
    def lookup(self, caspio_client) -> PackageLookup:
        return PackageLookup(caspio_client, table="destsel")

    def test_found(self, lookup, fake_caspio):
        fake_caspio.tables["destsel"] = [
            {
                "pkgcode2": "EM",
                "ref_dep": 300,
                "deposit": 99,
                "dest": "Cancun",
                "ngts": 5,
                "vacation_type": "Resort",
                "vaca_desc": "Five nights in Cancun",
            }
        ]
        package = lookup.resolve("em")

        assert package is not None
        assert package.pkgcode2 == "EM"
        assert package.total_expected == 399
        assert package.destination == "Cancun"
        assert package.nights == 5
        assert package.vaca_desc == "Five nights in Cancun"
        assert fake_caspio.queries[-1]["where"] == "pkgcode2='EM'"

    def test_prefers_primary_column_names(self, lookup, fake_caspio):
        fake_caspio.tables["destsel"] = [
            {"pkgcode2": "ES", "destination": "Orlando", "dest": "ORL", "nights": 3}
        ]
        package = lookup.resolve("ES")
        assert package.destination == "Orlando"
        assert package.nights == 3
        assert package.ref_dep == 0
        assert package.deposit == 0

    def test_not_found(self, lookup):
        assert lookup.resolve("NOPE") is None

    def test_empty_code_skips_query(self, lookup, fake_caspio):
        assert lookup.resolve("") is None
        assert lookup.resolve(None) is None
        assert fake_caspio.queries == []

    def test_failure_is_swallowed(self, lookup, fake_caspio):
        fake_caspio.failing_tables.add("destsel")
        assert lookup.resolve("EM") is None

    def test_non_json_reply_is_swallowed(self, lookup, fake_caspio):
        fake_caspio.maintenance_tables.add("destsel")
        assert lookup.resolve("EM") is None

    def test_fractional_nights(self, lookup, fake_caspio):
        fake_caspio.tables["destsel"] = [{"pkgcode2": "EM", "ref_dep": 300, "ngts": 7.5}]
        package = lookup.resolve("EM")
        assert package is not None
        assert package.nights == 7.5
        assert package.total_expected == 300

    def test_auth_failure_is_swallowed(self, lookup, fake_caspio):
        fake_caspio.auth_status = 500
        assert lookup.resolve("EM") is None
