"""
MEDDPPICC service - one scorecard per account.
"""
import uuid
import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.exceptions import NotFoundError, raise_bad_request, raise_not_found
from relateai.models.account import Account
from relateai.models.meddppicc import MEDDPPICC_SECTIONS, MeddppiccAssessment
from relateai.repositories.account_repo import AccountRepository
from relateai.repositories.meddppicc_repo import MeddppiccRepository
from relateai.schemas.meddppicc import MeddppiccCreate, NextStepCreate
from relateai.services.account_service import account_profile
from relateai.services.ai_service import AIService
from relateai.services.research_service import generate_meddppicc

logger = logging.getLogger(__name__)


class MeddppiccService:
    """Service for MEDDPPICC assessments. All lookups go through the owning account."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.account_repo = AccountRepository(session)
        self.meddppicc_repo = MeddppiccRepository(session)

    async def _get_account(self, owner_id: uuid.UUID, account_id: uuid.UUID) -> Account:
        account = await self.account_repo.get(account_id, owner_id)
        if not account:
            raise_not_found("Account", str(account_id))
        return account

    async def _ensure_absent(self, account_id: uuid.UUID) -> None:
        if await self.meddppicc_repo.get_by_account(account_id):
            raise_bad_request("MEDDPPICC assessment already exists for this account")

    async def get(self, owner_id: uuid.UUID, account_id: uuid.UUID) -> MeddppiccAssessment:
        await self._get_account(owner_id, account_id)
        assessment = await self.meddppicc_repo.get_by_account(account_id)
        if not assessment:
            raise NotFoundError("MEDDPPICC assessment")
        return assessment

    async def create(self, owner_id: uuid.UUID, account_id: uuid.UUID, data: MeddppiccCreate) -> MeddppiccAssessment:
        await self._get_account(owner_id, account_id)
        await self._ensure_absent(account_id)

        values = data.model_dump(mode="json", exclude_none=True)
        assessment = MeddppiccAssessment(
            account_id=account_id,
            owner_id=owner_id,
            last_updated_by=owner_id,
            **values
        )
        assessment.recalculate_scores()
        assessment = await self.meddppicc_repo.save(assessment)
        logger.info("MEDDPPICC assessment created for account %s", account_id)
        return assessment

    async def update(self, owner_id: uuid.UUID, account_id: uuid.UUID, data) -> MeddppiccAssessment:
        assessment = await self.get(owner_id, account_id)
        values = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None
        }
        for key, value in values.items():
            setattr(assessment, key, value)
        assessment.last_updated_by = owner_id
        assessment.recalculate_scores()
        return await self.meddppicc_repo.update(assessment, {})

    async def delete(self, owner_id: uuid.UUID, account_id: uuid.UUID) -> None:
        assessment = await self.get(owner_id, account_id)
        await self.meddppicc_repo.delete(assessment)

    async def generate(self, owner_id: uuid.UUID, account_id: uuid.UUID, ai: AIService) -> MeddppiccAssessment:
        """Draft an assessment for an existing account with AI."""
        account = await self._get_account(owner_id, account_id)
        await self._ensure_absent(account_id)

        draft = await generate_meddppicc(ai, account_profile(account))
        assessment = MeddppiccAssessment(
            account_id=account.id,
            owner_id=owner_id,
            last_updated_by=owner_id,
            **{key: draft[key] for key in (*MEDDPPICC_SECTIONS, "next_steps", "deal_notes") if key in draft}
        )
        assessment.recalculate_scores()
        assessment = await self.meddppicc_repo.save(assessment)
        logger.info("MEDDPPICC assessment generated for account %s", account_id)
        return assessment

    async def add_next_step(
        self, owner_id: uuid.UUID, account_id: uuid.UUID, data: NextStepCreate
    ) -> MeddppiccAssessment:
        assessment = await self.get(owner_id, account_id)
        step = data.model_dump(mode="json")
        return await self.meddppicc_repo.update(assessment, {
            "next_steps": [*(assessment.next_steps or []), step],
            "last_updated_by": owner_id,
        })

    async def update_next_step(
        self, owner_id: uuid.UUID, account_id: uuid.UUID, index: int, data
    ) -> MeddppiccAssessment:
        assessment = await self.get(owner_id, account_id)
        steps = [dict(step) for step in assessment.next_steps or []]
        if index < 0 or index >= len(steps):
            raise NotFoundError("Next step", str(index))

        changes = {
            key: value
            for key, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None
        }
        steps[index].update(changes)
        return await self.meddppicc_repo.update(assessment, {
            "next_steps": steps,
            "last_updated_by": owner_id,
        })
