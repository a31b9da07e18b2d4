from enum import StrEnum

from pydantic import BaseModel


class LeadStatus(StrEnum):
    new = "new"
    contacted = "contacted"
    negotiation = "negotiation"
    closed = "closed"


class LeadScore(StrEnum):
    hot = "hot"
    warm = "warm"
    cold = "cold"


class QualityTier(StrEnum):
    opportunity = "opportunity"
    high_ticket = "high-ticket"
    urgent = "urgent"


class BusinessSize(StrEnum):
    small = "small"
    medium = "medium"
    large = "large"


class WebsiteRule(StrEnum):
    any = "any"
    must_have = "must_have"
    must_not_have = "must_not_have"


class Lead(BaseModel):
    id: str
    name: str
    phone: str
    normalized_phone: str | None = None  # digits only; None = unusable
    instagram: str | None = None
    website: str | None = None
    description: str
    pain_points: list[str] = []
    match_reason: str
    quality_tier: QualityTier = QualityTier.opportunity
    score: LeadScore
    status: LeadStatus = LeadStatus.new
    audit: str | None = None


class GroundingSource(BaseModel):
    title: str
    uri: str


class SearchFilters(BaseModel):
    website_rule: WebsiteRule = WebsiteRule.any
    instagram_required: bool = False
    mobile_only: bool = False


class SearchResult(BaseModel):
    leads: list[Lead] = []
    sources: list[GroundingSource] = []
    attempts: int = 0
