from typing import Annotated

from fastapi import Depends, Request

from leadhunter.jobs import JobStore
from leadhunter.mappers.phone import PhoneRegion
from leadhunter.services.coaching import SalesCoachService
from leadhunter.services.lead_search import LeadSearchService
from leadhunter.services.pipeline import LeadPipeline


def get_search_service(request: Request) -> LeadSearchService:
    return request.app.state.search_service


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


def get_pipeline(request: Request) -> LeadPipeline:
    return request.app.state.pipeline


def get_coach(request: Request) -> SalesCoachService:
    return request.app.state.coach


def get_phone_region(request: Request) -> PhoneRegion | None:
    return getattr(request.app.state, "phone_region", None)


SearchDep = Annotated[LeadSearchService, Depends(get_search_service)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
PipelineDep = Annotated[LeadPipeline, Depends(get_pipeline)]
CoachDep = Annotated[SalesCoachService, Depends(get_coach)]
PhoneRegionDep = Annotated[PhoneRegion | None, Depends(get_phone_region)]
