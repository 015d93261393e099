"""
Tests for request validation: field checks, derived update schemas and the
error envelopes produced by the ``validate`` dependency.
"""
import pytest
from httpx import AsyncClient
from pydantic import ValidationError

from relateai.core.validation import format_validation_errors
from relateai.schemas.account import AccountCreate, AccountQuery, AccountUpdate, ResearchRequest
from relateai.schemas.common import PageQuery
from relateai.schemas.contact import ContactUpdate


class TestAccountSchema:
    """AccountCreate field checks."""

    def test_name_required(self):
        with pytest.raises(ValidationError) as exc_info:
            AccountCreate.model_validate({})

        errors = format_validation_errors(exc_info.value)
        assert errors == [{"path": "name", "message": "Field required"}]

    def test_name_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            AccountCreate(name="x" * 201)

        errors = format_validation_errors(exc_info.value)
        assert errors[0]["path"] == "name"

    def test_invalid_website(self):
        with pytest.raises(ValidationError) as exc_info:
            AccountCreate(name="Acme", website="invalid-website")

        errors = format_validation_errors(exc_info.value)
        assert errors == [{"path": "website", "message": "Please enter a valid website URL"}]

    @pytest.mark.parametrize("website", ["https://acme.com", "acme.com", "http://www.acme.co.uk/about"])
    def test_valid_websites(self, website):
        assert AccountCreate(name="Acme", website=website).website == website

    def test_icp_score_bounds(self):
        with pytest.raises(ValidationError):
            AccountCreate(name="Acme", icp_score=101)


class TestResearchRequest:
    """Either a URL or a name is needed."""

    def test_url_only(self):
        assert ResearchRequest(url="acme.com").url == "acme.com"

    def test_name_only(self):
        assert ResearchRequest(name="Acme").name == "Acme"

    def test_neither_reported_under_research(self):
        with pytest.raises(ValidationError) as exc_info:
            ResearchRequest.model_validate({})

        errors = format_validation_errors(exc_info.value)
        assert errors == [{"path": "research", "message": "Either URL or name is required"}]

    def test_bad_url_reported_on_field(self):
        with pytest.raises(ValidationError) as exc_info:
            ResearchRequest(url="not a url")

        assert format_validation_errors(exc_info.value)[0]["path"] == "url"


class TestPartialSchemas:
    """Update schemas keep the checks but make every field optional."""

    def test_empty_update_is_valid(self):
        update = AccountUpdate.model_validate({})
        assert update.model_dump(exclude_unset=True) == {}

    def test_checks_still_apply(self):
        with pytest.raises(ValidationError):
            AccountUpdate(name="")
        with pytest.raises(ValidationError):
            AccountUpdate(website="invalid-website")

    def test_contact_update_link_check(self):
        with pytest.raises(ValidationError) as exc_info:
            ContactUpdate(linkedin_url="not-a-url")

        assert format_validation_errors(exc_info.value) == [{"path": "linkedin_url", "message": "Invalid url"}]

    def test_contact_update_allows_clearing_link(self):
        assert ContactUpdate(linkedin_url="").linkedin_url == ""


class TestQueryCoercion:
    """Query strings arrive as text."""

    def test_digits_become_int(self):
        assert PageQuery.model_validate({"page": "10", "limit": "5"}).page == 10

    @pytest.mark.parametrize("value", ["abc", "-1", "1.5"])
    def test_non_digits_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            PageQuery.model_validate({"page": value})

        assert format_validation_errors(exc_info.value) == [{"path": "page", "message": "Must be a whole number"}]

    def test_oversized_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            PageQuery.model_validate({"page": "99999999999999999999"})

        assert [error["path"] for error in format_validation_errors(exc_info.value)] == ["page"]

    def test_csv_tags(self):
        query = AccountQuery.model_validate({"tags": "saas, enterprise,,"})
        assert query.tags == ["saas", "enterprise"]

    def test_unknown_sort_key_rejected(self):
        with pytest.raises(ValidationError):
            AccountQuery.model_validate({"sort_by": "password"})


# =============================================================================
# ERROR ENVELOPES
# =============================================================================

@pytest.mark.asyncio
async def test_body_validation_envelope(client: AsyncClient, auth_headers):
    """Schema violations come back as 400 with a path per error."""
    response = await client.post("/api/accounts", json={"website": "invalid-website"}, headers=auth_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    paths = {error["path"] for error in body["errors"]}
    assert paths == {"name", "website"}


@pytest.mark.asyncio
async def test_query_validation_envelope(client: AsyncClient, auth_headers):
    response = await client.get("/api/accounts", params={"page": "abc"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"] == [{"path": "page", "message": "Must be a whole number"}]


@pytest.mark.asyncio
async def test_oversized_page_is_a_validation_error(client: AsyncClient, auth_headers):
    response = await client.get("/api/accounts", params={"page": "99999999999999999999"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "page"


@pytest.mark.asyncio
async def test_path_validation_envelope(client: AsyncClient, auth_headers):
    """Malformed ids are reported like any other validation error."""
    response = await client.get("/api/accounts/not-a-uuid", headers=auth_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert body["errors"][0]["path"] == "account_id"


@pytest.mark.asyncio
async def test_malformed_json_is_a_validation_fault(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/accounts",
        content=b"{not json",
        headers={**auth_headers, "Content-Type": "application/json"}
    )

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Internal server error during validation"
    assert body["error"]


@pytest.mark.asyncio
async def test_unknown_route_envelope(client: AsyncClient):
    response = await client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}
