from enum import StrEnum

from pydantic import BaseModel, Field


class ServiceContext(BaseModel):
    service_name: str = ""
    description: str = ""
    target_audience: str = ""
    ticket_value: float | None = None


class ServiceInsights(BaseModel):
    recommended_niche: str
    suggested_ticket: float
    reasoning: str
    potential: str


class SequenceStep(BaseModel):
    day: str
    trigger: str
    message: str
    explanation: str = ""


class RoleplayProfile(StrEnum):
    skeptic = "skeptic"
    cheap = "cheap"
    hasty = "hasty"


class RoleplayMessage(BaseModel):
    sender: str  # "user" | "ai"
    text: str
    feedback: str | None = None
    score: int | None = Field(default=None, ge=0, le=10)


class ObjectionResponse(BaseModel):
    objection: str
    responses: list[str] = []
    tip: str = ""
