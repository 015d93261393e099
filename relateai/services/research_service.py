"""
Company research, MEDDPPICC drafting, message drafting and ICP scoring.

The LLM calls degrade to neutral defaults on any provider error so that a
research request still produces a usable record.
"""
import json
import logging
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import urlparse

from fastapi.concurrency import run_in_threadpool

from relateai.models.base import utcnow
from relateai.models.meddppicc import MEDDPPICC_SECTIONS, CONFIDENCE_LEVELS
from relateai.services.ai_service import AIService, AIServiceError

logger = logging.getLogger(__name__)

# ICP definition
TARGET_INDUSTRIES = ["Technology", "Software", "Financial Services", "Healthcare", "E-commerce"]
TARGET_TECHNOLOGIES = ["AWS", "Azure", "GCP", "React", "Node.js", "Python", "TensorFlow"]
TARGET_LOCATIONS = ["United States", "Canada", "United Kingdom", "Europe"]
TARGET_TAGS = ["AI", "Machine Learning", "SaaS", "Cloud", "Enterprise"]

PROFILE_FIELDS = ("name", "website", "industry", "description", "size", "location", "revenue", "notes")

RESEARCH_PROMPT = """Research the company "{query}" and provide the following information in JSON format:
{{
  "name": "Full company name",
  "website": "Company website URL",
  "industry": "Main industry",
  "description": "Brief company description",
  "size": "Employee count range (e.g., '1-10', '11-50', '51-200', '201-500', '501-1000', '1001-5000', '5000+')",
  "location": "HQ location",
  "revenue": "Annual revenue range or exact if known",
  "technologies": ["List", "of", "technologies", "used"],
  "tags": ["Relevant", "tags"],
  "notes": "Any additional relevant information"
}}

If you can't find specific information, use "Unknown" as the value. For technologies and tags, provide empty arrays if unknown."""

MEDDPPICC_PROMPT = """Based on the following company information, generate a MEDDPPICC sales qualification framework assessment in JSON format:

Company: {company}

Return a JSON object with these keys: {sections}.
Each of those is {{"score": 1-3 (integer), "notes": "assessment", "confidence": "low/medium/high"}}.
Also include "next_steps": [{{"text": "step", "due_date": "ISO-8601 date"}}] and "deal_notes": "overall notes about the deal".

Given the limited information provided, scores should generally start low (1-2) with appropriate confidence levels."""

MESSAGE_PROMPT = """Write a {length} {tone} {message_type} {channel} message to {recipient_name}, a {recipient_type} ({title}) at {company}.
{instructions}
Return JSON: {{"subject": "subject line", "content": "message body"}}"""


def research_query(url: Optional[str] = None, name: Optional[str] = None) -> str:
    """The name when given, otherwise the URL hostname without ``www.``."""
    if name:
        return name
    target = url if "://" in url else f"https://{url}"
    host = urlparse(target).hostname or url
    return host.replace("www.", "", 1)


def fallback_company_profile(query: str) -> dict:
    return {
        "name": query,
        "website": "",
        "industry": "Unknown",
        "description": "No description available",
        "size": "Unknown",
        "location": "Unknown",
        "revenue": "Unknown",
        "technologies": [],
        "tags": [],
        "notes": "Error occurred during research",
    }


def fallback_meddppicc(now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    data = {
        section: {"score": 1, "notes": "Insufficient data", "confidence": "low"}
        for section in MEDDPPICC_SECTIONS
    }
    data["next_steps"] = [
        {"text": "Research company leadership", "completed": False, "due_date": now.isoformat()},
        {"text": "Identify potential pain points", "completed": False, "due_date": (now + timedelta(days=7)).isoformat()},
    ]
    data["deal_notes"] = "Initial assessment based on limited information"
    return data


def _string_list(value) -> list:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def normalize_profile(raw: dict, query: str) -> dict:
    """Coerce a model reply into the company profile shape."""
    profile = fallback_company_profile(query)
    for field in PROFILE_FIELDS:
        value = raw.get(field)
        if isinstance(value, str) and value.strip():
            profile[field] = value.strip()
    profile["technologies"] = _string_list(raw.get("technologies"))
    profile["tags"] = _string_list(raw.get("tags"))
    if profile["notes"] == "Error occurred during research":
        profile["notes"] = ""
    return profile


def _section(raw) -> dict:
    if not isinstance(raw, dict):
        return {"score": 1, "notes": "Insufficient data", "confidence": "low"}
    try:
        score = float(raw.get("score", 1))
    except (TypeError, ValueError):
        score = 1
    confidence = raw.get("confidence") if raw.get("confidence") in CONFIDENCE_LEVELS else "low"
    return {"score": max(0, min(score, 3)), "notes": str(raw.get("notes") or ""), "confidence": confidence}


def normalize_meddppicc(raw: dict) -> dict:
    """Coerce a model reply into section dicts, next steps and notes."""
    data = {section: _section(raw.get(section)) for section in MEDDPPICC_SECTIONS}
    steps = []
    for step in raw.get("next_steps") or []:
        if isinstance(step, dict) and step.get("text"):
            due = step.get("due_date") or utcnow().isoformat()
            steps.append({"text": str(step["text"]), "completed": bool(step.get("completed", False)), "due_date": str(due)})
    data["next_steps"] = steps
    data["deal_notes"] = str(raw.get("deal_notes") or "")
    return data


async def research_company(ai: AIService, query: str) -> dict:
    """LLM company profile for ``query``; neutral profile on failure."""
    try:
        raw = await run_in_threadpool(ai.generate_json, RESEARCH_PROMPT.format(query=query))
        return normalize_profile(raw, query)
    except AIServiceError as e:
        logger.warning("Company research failed for %s: %s", query, e)
        return fallback_company_profile(query)


async def generate_meddppicc(ai: AIService, company: dict) -> dict:
    """LLM MEDDPPICC draft for a company profile; default scorecard on failure."""
    prompt = MEDDPPICC_PROMPT.format(
        company=json.dumps(company, default=str),
        sections=", ".join(MEDDPPICC_SECTIONS),
    )
    try:
        raw = await run_in_threadpool(ai.generate_json, prompt)
        return normalize_meddppicc(raw)
    except AIServiceError as e:
        logger.warning("MEDDPPICC generation failed for %s: %s", company.get("name"), e)
        return fallback_meddppicc()


async def draft_message(ai: AIService, contact, account, params) -> dict:
    """LLM message draft; a generic outreach note on failure."""
    prompt = MESSAGE_PROMPT.format(
        length=params.length,
        tone=params.tone,
        message_type=params.message_type,
        channel=params.channel,
        recipient_name=contact.full_name,
        recipient_type=params.recipient_type,
        title=contact.title or "unknown title",
        company=account.name if account else contact.company,
        instructions=params.custom_instructions or "",
    )
    try:
        raw = await run_in_threadpool(ai.generate_json, prompt)
        subject = str(raw.get("subject") or "").strip()
        content = str(raw.get("content") or "").strip()
        if subject and content:
            return {"subject": subject[:200], "content": content}
        logger.warning("Message draft for contact %s came back empty", contact.id)
    except AIServiceError as e:
        logger.warning("Message generation failed for contact %s: %s", contact.id, e)

    return {
        "subject": f"Follow-up: {params.message_type}"[:200],
        "content": (
            f"<p>Hello {contact.first_name},</p>\n"
            "<p>I hope this message finds you well. I wanted to reach out about our solution "
            "and how it could help your team.</p>\n"
            "<p>Would you be available for a brief call next week to discuss this further?</p>\n"
            "<p>Best regards,</p>"
        ),
    }


def calculate_icp_score(account) -> int:
    """Rule-based ICP fit score, 0-100."""
    score = 50

    if account.industry and account.industry in TARGET_INDUSTRIES:
        score += 10

    size = account.size or ""
    if "1000+" in size:
        score += 10
    elif "500+" in size:
        score += 5

    tech_matches = len([tech for tech in (account.technologies or []) if tech in TARGET_TECHNOLOGIES])
    score += min(tech_matches * 5, 15)

    location = account.location or ""
    if any(target in location for target in TARGET_LOCATIONS):
        score += 5

    revenue = account.revenue or ""
    if "$50M+" in revenue:
        score += 10
    elif "$10M+" in revenue:
        score += 5

    tag_matches = len([tag for tag in (account.tags or []) if tag in TARGET_TAGS])
    score += min(tag_matches * 5, 10)

    return max(0, min(score, 100))
