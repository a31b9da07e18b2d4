import asyncio
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from leadhunter.dependencies import JobStoreDep, PipelineDep, SearchDep
from leadhunter.jobs import JobStore
from leadhunter.mappers.lead_filters import normalize_name
from leadhunter.schemas.coaching import ServiceContext
from leadhunter.schemas.lead import BusinessSize, SearchFilters
from leadhunter.schemas.responses import JobStatusResponse, JobSubmittedResponse, SearchResponse
from leadhunter.services.lead_search import LeadSearchService
from leadhunter.services.pipeline import LeadPipeline

logger = logging.getLogger(__name__)

router = APIRouter()

NOTHING_FOUND_MESSAGE = (
    "A IA não encontrou contatos válidos com telefone para este nicho. "
    "Tente outro termo ou local."
)


class SearchRequest(BaseModel):
    niche: str = Field(min_length=1)
    location: str = Field(min_length=1)
    size: BusinessSize = BusinessSize.small
    target_count: int = Field(default=10, ge=1, le=100)
    existing_names: list[str] = []
    exclude_saved: bool = False  # also exclude every lead already in the pipeline
    filters: SearchFilters | None = None
    custom_instruction: str | None = None
    service_context: ServiceContext | None = None

    def subject(self) -> str:
        return f"{normalize_name(self.niche)}|{normalize_name(self.location)}"


def _with_saved_names(request: SearchRequest, pipeline: LeadPipeline) -> SearchRequest:
    if not request.exclude_saved:
        return request
    return request.model_copy(update={"existing_names": [*request.existing_names, *pipeline.names()]})


async def _search(service: LeadSearchService, request: SearchRequest) -> SearchResponse:
    result = await service.search(
        niche=request.niche,
        location=request.location,
        size=request.size,
        target_count=request.target_count,
        existing_names=request.existing_names,
        filters=request.filters,
        custom_instruction=request.custom_instruction,
        service_context=request.service_context,
    )
    return SearchResponse(
        **result.model_dump(),
        requested=request.target_count,
        message=None if result.leads else NOTHING_FOUND_MESSAGE,
    )


async def _run_search(
    job_id: str,
    service: LeadSearchService,
    store: JobStore,
    request: SearchRequest,
) -> None:
    store.mark_running(job_id)
    try:
        result = await _search(service, request)
        store.mark_completed(job_id, result)
    except Exception as exc:
        logger.exception("Search job %s failed", job_id)
        store.mark_failed(job_id, str(exc))


@router.post("/leads/search", response_model=JobSubmittedResponse, status_code=202)
async def submit_search(
    request: SearchRequest,
    service: SearchDep,
    store: JobStoreDep,
    pipeline: PipelineDep,
) -> JobSubmittedResponse:
    subject = request.subject()
    existing = store.has_active_job("search", subject)
    if existing:
        raise HTTPException(
            status_code=409,
            detail=f"A search for this niche and location is already running (job_id={existing.job_id})",
        )

    job = store.create_job(task_type="search", subject=subject)
    asyncio.create_task(
        _run_search(job.job_id, service, store, _with_saved_names(request, pipeline))
    )
    return JobSubmittedResponse(
        job_id=job.job_id,
        status=job.status,
        message="Search job submitted",
    )


@router.post("/leads/search/sync", response_model=SearchResponse)
async def search_sync(
    request: SearchRequest,
    service: SearchDep,
    pipeline: PipelineDep,
) -> SearchResponse:
    return await _search(service, _with_saved_names(request, pipeline))


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job_status(job_id: str, store: JobStoreDep) -> JobStatusResponse:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobStatusResponse(**job.model_dump())
