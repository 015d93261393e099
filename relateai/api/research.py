"""
Research API routes - AI company research, MEDDPPICC drafting and ICP scoring.
"""
import uuid
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.validation import validate
from relateai.services.account_service import AccountService
from relateai.services.meddppicc_service import MeddppiccService
from relateai.services.ai_service import AIService
from relateai.schemas.account import ResearchRequest, AccountRead
from relateai.schemas.meddppicc import MeddppiccRead
from relateai.api.deps import get_current_user, get_ai
from relateai.models.user import User

router = APIRouter(prefix="/api/research", tags=["research"])


@router.post("/account", status_code=201)
async def research_account(
    data: ResearchRequest = Depends(validate(ResearchRequest)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    ai: AIService = Depends(get_ai)
):
    """Research a company by URL or name and store it with a MEDDPPICC draft."""
    account, assessment = await AccountService(session).research(current_user.id, data, ai)
    return {
        "success": True,
        "message": "Account researched successfully",
        "account": AccountRead.model_validate(account),
        "assessment": MeddppiccRead.model_validate(assessment)
    }


@router.post("/meddppicc/{account_id}", status_code=201)
async def generate_meddppicc(
    account_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    ai: AIService = Depends(get_ai)
):
    """Generate a MEDDPPICC assessment for an existing account."""
    assessment = await MeddppiccService(session).generate(current_user.id, account_id, ai)
    return {
        "success": True,
        "message": "MEDDPPICC assessment generated successfully",
        "assessment": MeddppiccRead.model_validate(assessment)
    }


@router.post("/icp/{account_id}")
async def calculate_icp(
    account_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    score, account = await AccountService(session).calculate_icp(current_user.id, account_id)
    return {
        "success": True,
        "message": "ICP score calculated successfully",
        "icp_score": score,
        "account": AccountRead.model_validate(account)
    }
