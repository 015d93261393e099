"""
Email template service.
"""
import uuid
import logging
from typing import Tuple, List

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.exceptions import raise_not_found
from relateai.models.email_template import EmailTemplate
from relateai.repositories.email_template_repo import EmailTemplateRepository
from relateai.schemas.email_template import TemplateCreate, TemplatePreview, TemplateQuery
from relateai.services.email_service import generate_template
from relateai.services.templating import extract_variables, render_preview

logger = logging.getLogger(__name__)


def _generated_fields(subject: str, content: str) -> dict:
    """Layout output and placeholder list derived from subject and content."""
    layout = generate_template("basic", {"subject": subject, "content": content})
    return {
        "html": layout["html"],
        "plain_text": layout["text"],
        "variables": extract_variables(f"{subject}\n{content}"),
    }


class EmailTemplateService:
    """Service for email template operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.template_repo = EmailTemplateRepository(session)

    async def list(self, owner_id: uuid.UUID, query: TemplateQuery) -> Tuple[List[EmailTemplate], dict]:
        return await self.template_repo.search(
            owner_id,
            category=query.category,
            search=query.search,
            page=query.page or 1,
            limit=query.limit or 20,
            sort_order=query.sort_order or "desc",
        )

    async def defaults(self, owner_id: uuid.UUID) -> List[EmailTemplate]:
        return await self.template_repo.get_defaults(owner_id)

    async def get(self, owner_id: uuid.UUID, template_id: uuid.UUID) -> EmailTemplate:
        template = await self.template_repo.get(template_id, owner_id)
        if not template:
            raise_not_found("Email template", str(template_id))
        return template

    async def create(self, owner_id: uuid.UUID, data: TemplateCreate) -> EmailTemplate:
        values = data.model_dump(exclude_none=True)
        values.update(_generated_fields(data.subject, data.content))
        values["user_id"] = owner_id

        if data.is_default:
            await self.template_repo.clear_default(owner_id, data.category)

        template = await self.template_repo.create(values)
        logger.info("Email template %s created", template.id)
        return template

    async def update(self, owner_id: uuid.UUID, template_id: uuid.UUID, data) -> EmailTemplate:
        template = await self.get(owner_id, template_id)
        values = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if "subject" in values or "content" in values:
            values.update(_generated_fields(
                values.get("subject", template.subject),
                values.get("content", template.content),
            ))

        category = values.get("category", template.category)
        if values.get("is_default", template.is_default):
            await self.template_repo.clear_default(owner_id, category, keep_id=template.id)

        return await self.template_repo.update(template, values)

    async def delete(self, owner_id: uuid.UUID, template_id: uuid.UUID) -> None:
        template = await self.get(owner_id, template_id)
        await self.template_repo.delete(template)

    async def preview(self, owner_id: uuid.UUID, template_id: uuid.UUID, data: TemplatePreview) -> dict:
        """Render a template. Placeholders without a value show as [name]."""
        template = await self.get(owner_id, template_id)
        return render_preview(template.subject, template.content, data.variables).to_dict()
