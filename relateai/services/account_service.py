"""
Account service - CRUD, research and ICP scoring.
"""
import uuid
import logging
from typing import Tuple, List

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.exceptions import raise_not_found
from relateai.core.validation import URL_PATTERN
from relateai.models.account import Account
from relateai.models.meddppicc import MeddppiccAssessment
from relateai.repositories.account_repo import AccountRepository
from relateai.repositories.meddppicc_repo import MeddppiccRepository
from relateai.schemas.account import AccountCreate, AccountQuery, ResearchRequest
from relateai.services.ai_service import AIService
from relateai.services.research_service import (
    calculate_icp_score,
    generate_meddppicc,
    research_company,
    research_query,
)

logger = logging.getLogger(__name__)


def account_profile(account: Account) -> dict:
    """Company facts handed to the LLM."""
    return {
        "name": account.name,
        "website": account.website,
        "industry": account.industry,
        "description": account.description,
        "size": account.size,
        "location": account.location,
        "revenue": account.revenue,
        "technologies": account.technologies,
        "tags": account.tags,
    }


class AccountService:
    """Service for account operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.account_repo = AccountRepository(session)
        self.meddppicc_repo = MeddppiccRepository(session)

    async def list(self, owner_id: uuid.UUID, query: AccountQuery) -> Tuple[List[Account], dict]:
        return await self.account_repo.search(
            owner_id,
            search=query.search,
            industry=query.industry,
            size=query.size,
            tags=query.tags,
            icp_score_min=query.icp_score_min,
            icp_score_max=query.icp_score_max,
            page=query.page or 1,
            limit=query.limit or 20,
            sort_by=query.sort_by or "created_at",
            sort_order=query.sort_order or "desc",
        )

    async def get(self, owner_id: uuid.UUID, account_id: uuid.UUID) -> Account:
        account = await self.account_repo.get(account_id, owner_id)
        if not account:
            raise_not_found("Account", str(account_id))
        return account

    async def create(self, owner_id: uuid.UUID, data: AccountCreate) -> Account:
        values = data.model_dump(exclude_none=True)
        values["owner_id"] = owner_id
        account = await self.account_repo.create(values)
        logger.info("Account %s created", account.id)
        return account

    async def update(self, owner_id: uuid.UUID, account_id: uuid.UUID, data) -> Account:
        account = await self.get(owner_id, account_id)
        values = self.account_repo.without_cleared(data.model_dump(exclude_unset=True))
        return await self.account_repo.update(account, values)

    async def delete(self, owner_id: uuid.UUID, account_id: uuid.UUID) -> None:
        """Delete an account with its contacts, messages and assessment."""
        account = await self.get(owner_id, account_id)
        await self.account_repo.delete_cascade(account)
        logger.info("Account %s deleted", account_id)

    async def research(
        self, owner_id: uuid.UUID, request: ResearchRequest, ai: AIService
    ) -> Tuple[Account, MeddppiccAssessment]:
        """Research a company, then store it with a drafted MEDDPPICC assessment."""
        query = research_query(request.url, request.name)
        profile = await research_company(ai, query)

        website = profile.get("website") or ""
        if not URL_PATTERN.match(website):
            website = request.url

        account = await self.account_repo.create({
            "owner_id": owner_id,
            "name": (profile.get("name") or query)[:200],
            "website": website,
            "industry": profile.get("industry"),
            "description": profile.get("description"),
            "size": profile.get("size"),
            "location": profile.get("location"),
            "revenue": profile.get("revenue"),
            "technologies": profile.get("technologies", []),
            "tags": profile.get("tags", []),
            "notes": profile.get("notes"),
            "icp_score": 0,
            "status": "Researching",
        })

        draft = await generate_meddppicc(ai, profile)
        assessment = MeddppiccAssessment(account_id=account.id, owner_id=owner_id, last_updated_by=owner_id, **draft)
        assessment.recalculate_scores()
        assessment = await self.meddppicc_repo.save(assessment)

        logger.info("Account %s researched from '%s'", account.id, query)
        return account, assessment

    async def calculate_icp(self, owner_id: uuid.UUID, account_id: uuid.UUID) -> Tuple[int, Account]:
        account = await self.get(owner_id, account_id)
        score = calculate_icp_score(account)
        account = await self.account_repo.update(account, {"icp_score": score})
        return score, account
