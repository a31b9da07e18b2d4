from fastapi import APIRouter
from pydantic import BaseModel, Field

from leadhunter.dependencies import CoachDep
from leadhunter.schemas.coaching import (
    ObjectionResponse,
    RoleplayMessage,
    RoleplayProfile,
    SequenceStep,
    ServiceContext,
    ServiceInsights,
)
from leadhunter.schemas.lead import Lead

router = APIRouter(prefix="/coach")


class InsightsRequest(BaseModel):
    service_name: str = Field(min_length=1)
    description: str = ""


class RoleplayRequest(BaseModel):
    profile: RoleplayProfile = RoleplayProfile.skeptic
    history: list[RoleplayMessage] = []
    service_context: ServiceContext = ServiceContext()


class ObjectionRequest(BaseModel):
    objection: str = Field(min_length=1)
    service_context: ServiceContext = ServiceContext()
    lead: Lead | None = None


class LeadToolRequest(BaseModel):
    lead: Lead
    service_context: ServiceContext = ServiceContext()


@router.post("/insights", response_model=ServiceInsights)
async def insights(request: InsightsRequest, coach: CoachDep) -> ServiceInsights:
    return await coach.service_insights(request.service_name, request.description)


@router.post("/sequence", response_model=list[SequenceStep])
async def sequence(service_context: ServiceContext, coach: CoachDep) -> list[SequenceStep]:
    return await coach.follow_up_sequence(service_context)


@router.post("/roleplay", response_model=RoleplayMessage)
async def roleplay(request: RoleplayRequest, coach: CoachDep) -> RoleplayMessage:
    if not request.history:
        return coach.opening_turn()
    return await coach.roleplay_turn(request.profile, request.history, request.service_context)


@router.post("/objection", response_model=ObjectionResponse)
async def objection(request: ObjectionRequest, coach: CoachDep) -> ObjectionResponse:
    return await coach.handle_objection(request.objection, request.service_context, request.lead)


@router.post("/copy")
async def copy(request: LeadToolRequest, coach: CoachDep) -> dict:
    return {"message": await coach.marketing_copy(request.lead, request.service_context)}


@router.post("/audit")
async def audit(request: LeadToolRequest, coach: CoachDep) -> dict:
    return {"audit": await coach.lead_audit(request.lead, request.service_context)}
