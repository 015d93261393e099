"""
MEDDPPICC schemas.
"""
import uuid
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field

from relateai.core.validation import partial

Confidence = Literal["low", "medium", "high"]


class SectionScore(BaseModel):
    """One MEDDPPICC section."""
    score: float = Field(ge=0, le=3)
    notes: str = ""
    confidence: Confidence = "low"


class NextStepCreate(BaseModel):
    """Add a next step to an assessment."""
    text: str = Field(min_length=1)
    due_date: datetime
    completed: bool = False


NextStepUpdate = partial(NextStepCreate, "NextStepUpdate")


class MeddppiccCreate(BaseModel):
    """Create an assessment. Omitted sections start at zero."""
    metrics: Optional[SectionScore] = None
    economic_buyer: Optional[SectionScore] = None
    decision_criteria: Optional[SectionScore] = None
    decision_process: Optional[SectionScore] = None
    paper_process: Optional[SectionScore] = None
    identified_pain: Optional[SectionScore] = None
    champion: Optional[SectionScore] = None
    competition: Optional[SectionScore] = None
    next_steps: Optional[List[NextStepCreate]] = None
    deal_notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "metrics": {"score": 2, "notes": "20% cost reduction target", "confidence": "medium"},
                "champion": {"score": 3, "notes": "VP Sales is pushing", "confidence": "high"},
                "deal_notes": "Budget approved for Q3"
            }
        }


MeddppiccUpdate = partial(MeddppiccCreate, "MeddppiccUpdate")


class MeddppiccRead(BaseModel):
    """Assessment response."""
    id: uuid.UUID
    account_id: uuid.UUID
    metrics: dict
    economic_buyer: dict
    decision_criteria: dict
    decision_process: dict
    paper_process: dict
    identified_pain: dict
    champion: dict
    competition: dict
    overall_score: float
    deal_health: str
    next_steps: List[dict]
    deal_notes: str
    last_updated_by: Optional[uuid.UUID]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
