import pytest
from pydantic import ValidationError as PydanticValidationError

from okta_policy_client.config.settings import Settings
from okta_policy_client.core.okta.client import OktaAPIClient, OktaClient
from okta_policy_client.core.okta.models import PasswordPolicy, PolicyType
from okta_policy_client.utils.error_handling import (
    AuthenticationError,
    OktaApiError,
    RateLimitError,
    ResourceNotFoundError,
    ServerError,
    UnsupportedResponseError,
    ValidationError,
)


@pytest.fixture
def small_page_settings(fake_settings: Settings) -> Settings:
    return fake_settings.model_copy(update={"OKTA_POLICY_PAGE_LIMIT": 2})


async def create_password_policies(client, count):
    return [
        await client.policies.create_policy(PasswordPolicy(name=f"py-sdk: paging {i}"))
        for i in range(count)
    ]


class TestLinkParsing:
    def test_extracts_next_url(self, offline_settings):
        api = OktaAPIClient(offline_settings)
        header = ('<https://x.okta.com/api/v1/policies?type=PASSWORD>; rel="self", '
                  '<https://x.okta.com/api/v1/policies?after=00p2&type=PASSWORD>; rel="next"')

        assert api._extract_next_url(header) == "https://x.okta.com/api/v1/policies?after=00p2&type=PASSWORD"

    def test_no_next_link(self, offline_settings):
        api = OktaAPIClient(offline_settings)

        assert api._extract_next_url('<https://x.okta.com/api/v1/policies>; rel="self"') is None
        assert api._extract_next_url("") is None

    def test_build_url_encodes_booleans_and_skips_none(self, offline_settings):
        api = OktaAPIClient(offline_settings)

        url = api._build_url("api/v1/policies", {"activate": False, "status": None})

        assert url == "https://example.okta.com/api/v1/policies?activate=false"


class TestPagination:
    @pytest.mark.asyncio
    async def test_follows_next_links_across_pages(self, small_page_settings, fake_okta):
        client = OktaClient(small_page_settings)
        created = await create_password_policies(client, 5)

        listed = [p async for p in client.policies.list_policies(PolicyType.PASSWORD)]

        assert [p.id for p in listed] == [p.id for p in created]
        page_requests = [path for method, path in fake_okta.requests if method == "GET"]
        assert len(page_requests) == 3
        assert "after=" in page_requests[1]

    @pytest.mark.asyncio
    async def test_each_listing_restarts_from_first_page(self, small_page_settings):
        client = OktaClient(small_page_settings)
        await create_password_policies(client, 3)

        first = [p.id async for p in client.policies.list_policies(PolicyType.PASSWORD)]
        second = [p.id async for p in client.policies.list_policies(PolicyType.PASSWORD)]

        assert first == second
        assert len(first) == 3

    @pytest.mark.asyncio
    async def test_pages_are_fetched_lazily(self, small_page_settings, fake_okta):
        client = OktaClient(small_page_settings)
        await create_password_policies(client, 5)
        fake_okta.requests.clear()

        listing = client.policies.list_policies(PolicyType.PASSWORD)
        await listing.__anext__()
        await listing.aclose()

        assert len(fake_okta.requests) == 1

    @pytest.mark.asyncio
    async def test_stops_at_max_pages(self, small_page_settings, monkeypatch):
        client = OktaClient(small_page_settings)
        client.api.max_pages = 2
        await create_password_policies(client, 5)
        warnings = []
        monkeypatch.setattr(client.api.logger, "warning", warnings.append)

        listed = [p async for p in client.policies.list_policies(PolicyType.PASSWORD)]

        assert len(listed) == 4
        assert len(warnings) == 1
        assert "max_pages" in warnings[0]

    @pytest.mark.asyncio
    async def test_empty_page_with_next_link_ends_quietly(self, fake_client, fake_okta, monkeypatch):
        next_link = f"<{fake_client.settings.org_url}/api/v1/policies?after=00px&type=PASSWORD>; rel=\"next\""
        fake_okta.force_response(200, [], headers={"Link": next_link})
        warnings = []
        monkeypatch.setattr(fake_client.api.logger, "warning", warnings.append)

        listed = [p async for p in fake_client.policies.list_policies(PolicyType.PASSWORD)]

        assert listed == []
        assert warnings == []
        assert len(fake_okta.requests) == 1

    @pytest.mark.asyncio
    async def test_status_filter(self, fake_client):
        _, inactive = await create_password_policies(fake_client, 2)
        await fake_client.policies.deactivate_policy(inactive.id)

        listed = [p.id async for p in fake_client.policies.list_policies("PASSWORD", status="INACTIVE")]

        assert listed == [inactive.id]

    @pytest.mark.asyncio
    async def test_unsupported_type_is_rejected_before_any_request(self, fake_client, fake_okta):
        with pytest.raises(ValueError):
            [p async for p in fake_client.policies.list_policies("NOT_A_TYPE")]
        assert fake_okta.requests == []


class TestErrors:
    @pytest.mark.asyncio
    async def test_unknown_policy_raises_not_found(self, fake_client):
        with pytest.raises(ResourceNotFoundError) as excinfo:
            await fake_client.policies.get_policy("00pmissing")

        assert excinfo.value.status_code == 404
        assert excinfo.value.error_code == "E0000007"
        assert excinfo.value.method == "GET"

    @pytest.mark.asyncio
    async def test_rate_limit_is_raised_without_retry(self, fake_client, fake_okta):
        fake_okta.force_response(
            429,
            {"errorCode": "E0000047", "errorSummary": "API call exceeded rate limit due to too many requests."},
            headers={"Retry-After": "12", "X-Rate-Limit-Limit": "600", "X-Rate-Limit-Remaining": "0"},
        )

        with pytest.raises(RateLimitError) as excinfo:
            await fake_client.policies.get_policy("00p1")

        assert excinfo.value.retry_after == 12
        assert len(fake_okta.requests) == 1

    @pytest.mark.asyncio
    async def test_server_error(self, fake_client, fake_okta):
        fake_okta.force_response(500, {"errorCode": "E0000009", "errorSummary": "Internal Server Error"})

        with pytest.raises(ServerError):
            await fake_client.policies.activate_policy("00p1")

    @pytest.mark.asyncio
    async def test_bad_token_raises_authentication_error(self, fake_settings):
        client = OktaClient(fake_settings.model_copy(update={"OKTA_API_TOKEN": "wrong"}))

        with pytest.raises(AuthenticationError) as excinfo:
            await client.policies.get_policy("00p1")

        assert excinfo.value.error_code == "E0000011"

    @pytest.mark.asyncio
    async def test_network_failure_is_an_api_error(self, fake_settings):
        client = OktaClient(fake_settings.model_copy(update={"OKTA_CLIENT_ORGURL": "http://127.0.0.1:1"}))

        with pytest.raises(OktaApiError) as excinfo:
            await client.policies.get_policy("00p1")

        assert excinfo.value.error_code == "NETWORK_ERROR"
        assert excinfo.value.status_code is None
        assert excinfo.value.original_exception is not None

    @pytest.mark.asyncio
    async def test_empty_id_is_rejected_locally(self, fake_client, fake_okta):
        with pytest.raises(ValidationError):
            await fake_client.policies.get_policy("")
        with pytest.raises(ValidationError):
            await fake_client.policies.delete_policy_rule("00p1", " ")

        assert fake_okta.requests == []

    @pytest.mark.asyncio
    async def test_unmodelled_policy_type_is_an_api_error(self, fake_client, fake_okta):
        fake_okta.policies["00pacc"] = {"id": "00pacc", "name": "App sign-in", "type": "ACCESS_POLICY",
                                        "status": "ACTIVE"}

        with pytest.raises(UnsupportedResponseError) as excinfo:
            await fake_client.policies.get_policy("00pacc")

        assert isinstance(excinfo.value, OktaApiError)
        assert isinstance(excinfo.value.original_exception, PydanticValidationError)
        assert excinfo.value.context["resource_type"] == "ACCESS_POLICY"
        assert excinfo.value.endpoint == "/api/v1/policies/00pacc"

    @pytest.mark.asyncio
    async def test_unreadable_listed_policy_is_an_api_error(self, fake_client, fake_okta):
        fake_okta.policies["00plong"] = {"id": "00plong", "name": "x" * 60, "type": "PASSWORD",
                                         "status": "ACTIVE"}

        with pytest.raises(UnsupportedResponseError) as excinfo:
            [p async for p in fake_client.policies.list_policies(PolicyType.PASSWORD)]

        assert excinfo.value.context["resource_id"] == "00plong"

    @pytest.mark.asyncio
    async def test_unreadable_rule_is_an_api_error(self, fake_client, fake_okta):
        policy = (await create_password_policies(fake_client, 1))[0]
        fake_okta.rules[policy.id]["0prodd"] = {"id": "0prodd", "name": "odd", "type": "ACCESS_POLICY"}

        with pytest.raises(UnsupportedResponseError):
            await fake_client.policies.get_policy_rule(policy.id, "0prodd")

    @pytest.mark.asyncio
    async def test_malformed_json_success_is_an_api_error(self, fake_client, fake_okta):
        fake_okta.force_response(200, text='{"id": "00p1", ', content_type="application/json")

        with pytest.raises(UnsupportedResponseError) as excinfo:
            await fake_client.policies.get_policy("00p1")

        assert excinfo.value.status_code == 200
        assert excinfo.value.error_code == "INVALID_RESPONSE"

    @pytest.mark.asyncio
    async def test_malformed_json_error_keeps_status_class(self, fake_client, fake_okta):
        fake_okta.force_response(502, text="<html>Bad Gateway</html>", content_type="application/json")

        with pytest.raises(ServerError) as excinfo:
            await fake_client.policies.get_policy("00p1")

        assert excinfo.value.error_summary == "<html>Bad Gateway</html>"

    @pytest.mark.asyncio
    async def test_non_numeric_rate_limit_headers_are_ignored(self, fake_client, fake_okta):
        fake_okta.force_response(
            200,
            {"id": "00p1", "name": "py-sdk: headers", "type": "PASSWORD", "status": "ACTIVE"},
            headers={"X-Rate-Limit-Limit": "unlimited", "X-Rate-Limit-Remaining": "n/a"},
        )

        policy = await fake_client.policies.get_policy("00p1")

        assert policy.id == "00p1"

    def test_ids_are_url_quoted(self, offline_settings):
        policies = OktaClient(offline_settings).policies
        assert policies._policy_path("a/b") == "/api/v1/policies/a%2Fb"
        assert policies._rule_path("00p1", "0pr 1") == "/api/v1/policies/00p1/rules/0pr%201"


@pytest.mark.asyncio
async def test_sends_ssws_token_and_json(fake_client, fake_okta):
    created = await fake_client.policies.create_policy(PasswordPolicy(name="py-sdk: headers"))

    assert created.id in fake_okta.policies
    assert fake_okta.requests[-1] == ("POST", "/api/v1/policies?activate=true")
