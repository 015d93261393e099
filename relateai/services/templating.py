"""
Template variable substitution.

Content carries ``{{name}}`` placeholders. Two rendering policies:
    render_preview  unknown placeholders shown as ``[name]``
    render_strict   unknown placeholders raise UnresolvedVariablesError
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from relateai.services.email_service import generate_template

VARIABLE_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


class UnresolvedVariablesError(ValueError):
    """Content still has placeholders with no value."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Unresolved template variables: {', '.join(missing)}")


@dataclass
class RenderedEmail:
    subject: str
    content: str
    html: str
    text: str

    def to_dict(self) -> dict:
        return {"subject": self.subject, "content": self.content, "html": self.html, "text": self.text}


def extract_variables(content: Optional[str]) -> List[str]:
    """Distinct placeholder names, in order of first appearance."""
    seen: List[str] = []
    for match in VARIABLE_PATTERN.finditer(content or ""):
        name = match.group(1).strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def _substitute(text: str, variables: Mapping[str, object], missing: List[str]) -> str:
    def replace(match: "re.Match[str]") -> str:
        name = match.group(1).strip()
        if name in variables and variables[name] is not None:
            return str(variables[name])
        if name not in missing:
            missing.append(name)
        return f"[{name}]"

    return VARIABLE_PATTERN.sub(replace, text or "")


def render_preview(subject: str, content: str, variables: Optional[Mapping[str, object]] = None) -> RenderedEmail:
    """Best-effort render for display."""
    variables = variables or {}
    missing: List[str] = []
    rendered_subject = _substitute(subject, variables, missing)
    rendered_content = _substitute(content, variables, missing)
    layout = generate_template("basic", {"subject": rendered_subject, "content": rendered_content})
    return RenderedEmail(rendered_subject, rendered_content, layout["html"], layout["text"])


def render_strict(subject: str, content: str, variables: Optional[Mapping[str, object]] = None) -> RenderedEmail:
    """Render for delivery. Every placeholder must resolve."""
    variables = variables or {}
    missing: List[str] = []
    rendered_subject = _substitute(subject, variables, missing)
    rendered_content = _substitute(content, variables, missing)
    if missing:
        raise UnresolvedVariablesError(missing)
    layout = generate_template("basic", {"subject": rendered_subject, "content": rendered_content})
    return RenderedEmail(rendered_subject, rendered_content, layout["html"], layout["text"])


def contact_variables(contact, account=None, sender=None) -> Dict[str, str]:
    """Standard variables available when sending to a contact."""
    values = {
        "firstName": contact.first_name,
        "lastName": contact.last_name,
        "fullName": contact.full_name,
        "email": contact.email,
        "company": contact.company,
        "title": contact.title or "",
    }
    if account is not None:
        values["accountName"] = account.name
        values["industry"] = account.industry or ""
        values["website"] = account.website or ""
    if sender is not None:
        values["senderName"] = sender.full_name
        values["senderCompany"] = sender.company or ""
    # snake_case aliases
    values.update({
        "first_name": values["firstName"],
        "last_name": values["lastName"],
        "full_name": values["fullName"],
    })
    return values
