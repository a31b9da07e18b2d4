from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from leadhunter.schemas.lead import GroundingSource, Lead, LeadStatus


class SearchResponse(BaseModel):
    leads: list[Lead] = []
    sources: list[GroundingSource] = []
    attempts: int = 0
    requested: int
    message: str | None = None


class JobSubmittedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    created_at: datetime
    finished_at: datetime | None = None
    subject: str | None = None
    result: SearchResponse | None = None
    error: str | None = None


class PipelineSummary(BaseModel):
    saved: int
    valid_phones: int
    by_status: dict[LeadStatus, int]
    ticket_value: float
    potential_revenue: float


class OutreachMessage(BaseModel):
    lead_id: str
    message: str
    whatsapp_url: str | None = None
