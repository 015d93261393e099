"""
Email template API routes.
"""
import uuid
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.validation import validate
from relateai.services.email_template_service import EmailTemplateService
from relateai.schemas.email_template import (
    TemplateCreate, TemplateUpdate, TemplateQuery, TemplateRead, TemplatePreview
)
from relateai.api.deps import get_current_user
from relateai.models.user import User

router = APIRouter(prefix="/api/email-templates", tags=["email-templates"])


@router.get("")
async def list_templates(
    query: TemplateQuery = Depends(validate(TemplateQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    templates, pagination = await EmailTemplateService(session).list(current_user.id, query)
    return {
        "success": True,
        "templates": [TemplateRead.model_validate(t) for t in templates],
        "pagination": pagination
    }


@router.get("/defaults")
async def default_templates(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """The default template of each category."""
    templates = await EmailTemplateService(session).defaults(current_user.id)
    return {"success": True, "templates": [TemplateRead.model_validate(t) for t in templates]}


@router.post("", status_code=201)
async def create_template(
    data: TemplateCreate = Depends(validate(TemplateCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    template = await EmailTemplateService(session).create(current_user.id, data)
    return {"success": True, "message": "Email template created successfully", "template": TemplateRead.model_validate(template)}


@router.get("/{template_id}")
async def get_template(
    template_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    template = await EmailTemplateService(session).get(current_user.id, template_id)
    return {"success": True, "template": TemplateRead.model_validate(template)}


@router.put("/{template_id}")
async def update_template(
    template_id: uuid.UUID,
    data: TemplateUpdate = Depends(validate(TemplateUpdate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    template = await EmailTemplateService(session).update(current_user.id, template_id, data)
    return {"success": True, "message": "Email template updated successfully", "template": TemplateRead.model_validate(template)}


@router.delete("/{template_id}")
async def delete_template(
    template_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    await EmailTemplateService(session).delete(current_user.id, template_id)
    return {"success": True, "message": "Email template deleted successfully"}


@router.post("/{template_id}/preview")
async def preview_template(
    template_id: uuid.UUID,
    data: TemplatePreview = Depends(validate(TemplatePreview)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Render a template; placeholders without a value show as [name]."""
    preview = await EmailTemplateService(session).preview(current_user.id, template_id, data)
    return {"success": True, "preview": preview}
