"""
Tests for company research, MEDDPPICC drafting, message drafting and ICP scoring.
"""
import uuid
from types import SimpleNamespace

import pytest

from relateai.models.account import Account
from relateai.models.meddppicc import MEDDPPICC_SECTIONS, MeddppiccAssessment, deal_health_for
from relateai.schemas.message import MessageGenerate
from relateai.services.research_service import (
    calculate_icp_score,
    draft_message,
    generate_meddppicc,
    normalize_meddppicc,
    research_company,
    research_query,
)
from tests.utils import FakeAI


def make_account(**fields) -> Account:
    return Account(owner_id=uuid.uuid4(), name="Acme Corp", **fields)


class TestResearchQuery:

    def test_name_wins(self):
        assert research_query("https://www.acme.com", "Acme") == "Acme"

    def test_hostname_without_www(self):
        assert research_query("https://www.acme.com/about") == "acme.com"

    def test_bare_domain(self):
        assert research_query("acme.io") == "acme.io"


class TestIcpScore:
    """Rule-based ICP scoring."""

    def test_baseline(self):
        assert calculate_icp_score(make_account()) == 50

    def test_partial_fit(self):
        account = make_account(
            industry="Software",
            size="500+ employees",
            technologies=["AWS", "COBOL"],
            revenue="$10M+",
        )
        assert calculate_icp_score(account) == 75

    def test_full_fit_is_capped(self):
        account = make_account(
            industry="Software",
            size="1000+ employees",
            technologies=["AWS", "Python", "React", "Go"],
            location="Austin, United States",
            revenue="$50M+",
            tags=["AI", "SaaS", "Cloud"],
        )
        assert calculate_icp_score(account) == 100

    def test_technology_bonus_capped(self):
        account = make_account(technologies=["AWS", "Azure", "GCP", "React", "Python"])
        assert calculate_icp_score(account) == 65


class TestDealHealth:

    @pytest.mark.parametrize("score,health", [
        (3.0, "Healthy"),
        (2.5, "Healthy"),
        (2.49, "Moderate Risk"),
        (1.5, "Moderate Risk"),
        (1.49, "High Risk"),
        (0.0, "High Risk"),
    ])
    def test_thresholds(self, score, health):
        assert deal_health_for(score) == health

    def test_recalculate_scores(self):
        assessment = MeddppiccAssessment(
            account_id=uuid.uuid4(),
            owner_id=uuid.uuid4(),
            **{section: {"score": 3, "notes": "", "confidence": "high"} for section in MEDDPPICC_SECTIONS}
        )
        assessment.recalculate_scores()
        assert assessment.overall_score == 3.0
        assert assessment.deal_health == "Healthy"

    def test_missing_sections_count_as_zero(self):
        assessment = MeddppiccAssessment(
            account_id=uuid.uuid4(),
            owner_id=uuid.uuid4(),
            metrics={"score": 3, "notes": "", "confidence": "high"},
        )
        assessment.recalculate_scores()
        assert assessment.overall_score == pytest.approx(3 / 8)
        assert assessment.deal_health == "High Risk"


class TestNormalizeMeddppicc:

    def test_scores_clamped_and_confidence_checked(self):
        data = normalize_meddppicc({
            "metrics": {"score": 5, "notes": "Big", "confidence": "certain"},
            "champion": "not a section",
            "next_steps": [{"text": "Call CFO"}, {"no_text": True}],
            "deal_notes": "Promising",
        })

        assert data["metrics"] == {"score": 3, "notes": "Big", "confidence": "low"}
        assert data["champion"]["score"] == 1
        assert len(data["next_steps"]) == 1
        assert data["next_steps"][0]["completed"] is False
        assert data["deal_notes"] == "Promising"


@pytest.mark.asyncio
async def test_research_company_fallback():
    profile = await research_company(FakeAI(fail=True), "acme.com")

    assert profile["name"] == "acme.com"
    assert profile["industry"] == "Unknown"
    assert profile["technologies"] == []
    assert profile["notes"] == "Error occurred during research"


@pytest.mark.asyncio
async def test_research_company_normalizes_reply():
    ai = FakeAI(replies={"Research the company": {
        "name": " Acme Corporation ",
        "industry": "Software",
        "technologies": ["AWS", None, "React"],
        "tags": "not-a-list",
    }})

    profile = await research_company(ai, "acme.com")

    assert profile["name"] == "Acme Corporation"
    assert profile["industry"] == "Software"
    assert profile["technologies"] == ["AWS", "React"]
    assert profile["tags"] == []
    assert profile["size"] == "Unknown"
    assert profile["notes"] == ""
    assert '"acme.com"' in ai.prompts[0]


@pytest.mark.asyncio
async def test_generate_meddppicc_fallback():
    draft = await generate_meddppicc(FakeAI(fail=True), {"name": "Acme"})

    for section in MEDDPPICC_SECTIONS:
        assert draft[section] == {"score": 1, "notes": "Insufficient data", "confidence": "low"}
    assert [step["text"] for step in draft["next_steps"]] == [
        "Research company leadership",
        "Identify potential pain points",
    ]
    assert draft["deal_notes"] == "Initial assessment based on limited information"


@pytest.mark.asyncio
async def test_draft_message_fallback_and_reply():
    contact = SimpleNamespace(
        id=uuid.uuid4(), first_name="Jane", full_name="Jane Smith", title="VP Sales", company="Acme Corp"
    )
    account = SimpleNamespace(name="Acme Corp")
    params = MessageGenerate(
        contact_id=uuid.uuid4(),
        account_id=uuid.uuid4(),
        recipient_type="decision maker",
        message_type="introduction",
        tone="friendly",
        length="short",
    )

    fallback = await draft_message(FakeAI(fail=True), contact, account, params)
    assert fallback["subject"] == "Follow-up: introduction"
    assert "Hello Jane" in fallback["content"]

    ai = FakeAI(replies={"Write a": {"subject": "Quick idea", "content": "Hi Jane"}})
    drafted = await draft_message(ai, contact, account, params)
    assert drafted == {"subject": "Quick idea", "content": "Hi Jane"}
    assert "Jane Smith" in ai.prompts[0]
    assert "friendly" in ai.prompts[0]
