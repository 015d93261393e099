"""
MEDDPPICC API routes. Assessments are addressed by their account.
"""
import uuid
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.validation import validate
from relateai.services.meddppicc_service import MeddppiccService
from relateai.schemas.meddppicc import (
    MeddppiccCreate, MeddppiccUpdate, MeddppiccRead, NextStepCreate, NextStepUpdate
)
from relateai.api.deps import get_current_user
from relateai.models.user import User

router = APIRouter(prefix="/api/meddppicc", tags=["meddppicc"])


@router.get("/{account_id}")
async def get_assessment(
    account_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    assessment = await MeddppiccService(session).get(current_user.id, account_id)
    return {"success": True, "assessment": MeddppiccRead.model_validate(assessment)}


@router.post("/{account_id}", status_code=201)
async def create_assessment(
    account_id: uuid.UUID,
    data: MeddppiccCreate = Depends(validate(MeddppiccCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    assessment = await MeddppiccService(session).create(current_user.id, account_id, data)
    return {
        "success": True,
        "message": "MEDDPPICC assessment created successfully",
        "assessment": MeddppiccRead.model_validate(assessment)
    }


@router.put("/{account_id}")
async def update_assessment(
    account_id: uuid.UUID,
    data: MeddppiccUpdate = Depends(validate(MeddppiccUpdate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update sections; the overall score and deal health are recomputed."""
    assessment = await MeddppiccService(session).update(current_user.id, account_id, data)
    return {
        "success": True,
        "message": "MEDDPPICC assessment updated successfully",
        "assessment": MeddppiccRead.model_validate(assessment)
    }


@router.delete("/{account_id}")
async def delete_assessment(
    account_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    await MeddppiccService(session).delete(current_user.id, account_id)
    return {"success": True, "message": "MEDDPPICC assessment deleted successfully"}


@router.post("/{account_id}/next-steps")
async def add_next_step(
    account_id: uuid.UUID,
    data: NextStepCreate = Depends(validate(NextStepCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    assessment = await MeddppiccService(session).add_next_step(current_user.id, account_id, data)
    return {
        "success": True,
        "message": "Next step added successfully",
        "assessment": MeddppiccRead.model_validate(assessment)
    }


@router.put("/{account_id}/next-steps/{index}")
async def update_next_step(
    account_id: uuid.UUID,
    index: int,
    data: NextStepUpdate = Depends(validate(NextStepUpdate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    assessment = await MeddppiccService(session).update_next_step(current_user.id, account_id, index, data)
    return {
        "success": True,
        "message": "Next step updated successfully",
        "assessment": MeddppiccRead.model_validate(assessment)
    }
