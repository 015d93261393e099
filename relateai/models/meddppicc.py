"""
MEDDPPICC assessment model.
One scorecard per Account with eight scored sections.
"""
import uuid
from datetime import datetime
from typing import Optional, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column

from relateai.models.base import JSONType, utcnow

MEDDPPICC_SECTIONS = (
    "metrics",
    "economic_buyer",
    "decision_criteria",
    "decision_process",
    "paper_process",
    "identified_pain",
    "champion",
    "competition",
)

CONFIDENCE_LEVELS = ("low", "medium", "high")


def empty_section() -> dict:
    return {"score": 0, "notes": "", "confidence": "low"}


def deal_health_for(overall_score: float) -> str:
    """Map an overall 0-3 score to a deal health label."""
    if overall_score >= 2.5:
        return "Healthy"
    if overall_score >= 1.5:
        return "Moderate Risk"
    return "High Risk"


class MeddppiccAssessment(SQLModel, table=True):
    """
    MEDDPPICC scorecard.
    Each section is {"score": 0-3, "notes": str, "confidence": low|medium|high}.
    """
    __tablename__ = "meddppicc_assessment"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    account_id: uuid.UUID = Field(foreign_key="account.id", unique=True, index=True)
    owner_id: uuid.UUID = Field(foreign_key="user.id", index=True)

    # Sections
    metrics: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))
    economic_buyer: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))
    decision_criteria: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))
    decision_process: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))
    paper_process: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))
    identified_pain: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))
    champion: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))
    competition: dict = Field(default_factory=empty_section, sa_column=Column(JSONType))

    # Derived
    overall_score: float = Field(default=0.0)  # 0-3
    deal_health: str = Field(default="High Risk")

    # [{"text": str, "completed": bool, "due_date": iso}]
    next_steps: List[dict] = Field(default_factory=list, sa_column=Column(JSONType))
    deal_notes: str = Field(default="")
    last_updated_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def recalculate_scores(self) -> None:
        """Recompute overall_score and deal_health from the section scores."""
        scores = [float((getattr(self, name) or {}).get("score", 0)) for name in MEDDPPICC_SECTIONS]
        self.overall_score = sum(scores) / len(MEDDPPICC_SECTIONS)
        self.deal_health = deal_health_for(self.overall_score)
