import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from leadhunter.dependencies import CoachDep, PhoneRegionDep, PipelineDep
from leadhunter.mappers.csv_export import leads_to_csv
from leadhunter.mappers.phone import normalize_phone
from leadhunter.mappers.whatsapp import whatsapp_link
from leadhunter.schemas.coaching import ServiceContext
from leadhunter.schemas.lead import Lead, LeadStatus
from leadhunter.schemas.responses import OutreachMessage, PipelineSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pipeline")


class SaveLeadsRequest(BaseModel):
    leads: list[Lead]


class StatusUpdate(BaseModel):
    status: LeadStatus


class OutreachRequest(BaseModel):
    service_context: ServiceContext = ServiceContext()
    message: str | None = None  # skip generation and use this text
    desktop: bool = False


class BulkOutreachRequest(BaseModel):
    service_context: ServiceContext = ServiceContext()
    status: LeadStatus | None = None  # only leads in this stage
    desktop: bool = False


@router.get("", response_model=list[Lead])
async def list_leads(pipeline: PipelineDep, status: LeadStatus | None = None) -> list[Lead]:
    return pipeline.list_leads(status)


@router.post("", response_model=list[Lead], status_code=201)
async def save_leads(request: SaveLeadsRequest, pipeline: PipelineDep) -> list[Lead]:
    return [pipeline.save(lead) for lead in request.leads]


@router.delete("", status_code=200)
async def clear_pipeline(pipeline: PipelineDep) -> dict:
    return {"removed": pipeline.clear()}


@router.get("/summary", response_model=PipelineSummary)
async def pipeline_summary(pipeline: PipelineDep, ticket_value: float = 1500.0) -> PipelineSummary:
    return pipeline.summary(ticket_value)


@router.get("/export.csv", response_class=PlainTextResponse)
async def export_csv(pipeline: PipelineDep, status: LeadStatus | None = None) -> PlainTextResponse:
    return PlainTextResponse(
        leads_to_csv(pipeline.list_leads(status)),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="leads_export.csv"'},
    )


@router.post("/messages", response_model=list[OutreachMessage])
async def bulk_outreach_messages(
    request: BulkOutreachRequest,
    pipeline: PipelineDep,
    coach: CoachDep,
    region: PhoneRegionDep,
) -> list[OutreachMessage]:
    """One personalized message and WhatsApp link per saved lead with a usable phone.

    Leads are handled one after another. A lead whose copy call fails
    transiently still gets the canned message.
    """
    messages: list[OutreachMessage] = []
    skipped = 0
    for lead in pipeline.list_leads(request.status):
        if normalize_phone(lead.phone, region) is None:
            skipped += 1
            continue
        message = await coach.marketing_copy(lead, request.service_context)
        messages.append(OutreachMessage(
            lead_id=lead.id,
            message=message,
            whatsapp_url=whatsapp_link(lead.phone, message, region=region, desktop=request.desktop),
        ))
    logger.info("Bulk outreach: %d messages, %d leads skipped for invalid phone", len(messages), skipped)
    return messages


@router.get("/{lead_id}", response_model=Lead)
async def get_lead(lead_id: str, pipeline: PipelineDep) -> Lead:
    return pipeline.get(lead_id)


@router.delete("/{lead_id}", status_code=204)
async def remove_lead(lead_id: str, pipeline: PipelineDep) -> None:
    pipeline.remove(lead_id)


@router.patch("/{lead_id}/status", response_model=Lead)
async def update_status(lead_id: str, update: StatusUpdate, pipeline: PipelineDep) -> Lead:
    return pipeline.set_status(lead_id, update.status)


@router.post("/{lead_id}/advance", response_model=Lead)
async def advance_lead(lead_id: str, pipeline: PipelineDep) -> Lead:
    return pipeline.advance(lead_id)


@router.post("/{lead_id}/audit", response_model=Lead)
async def audit_lead(
    lead_id: str,
    service_context: ServiceContext,
    pipeline: PipelineDep,
    coach: CoachDep,
) -> Lead:
    lead = pipeline.get(lead_id)
    audit = await coach.lead_audit(lead, service_context)
    return pipeline.attach_audit(lead_id, audit)


@router.post("/{lead_id}/message", response_model=OutreachMessage)
async def outreach_message(
    lead_id: str,
    request: OutreachRequest,
    pipeline: PipelineDep,
    coach: CoachDep,
    region: PhoneRegionDep,
) -> OutreachMessage:
    lead = pipeline.get(lead_id)
    message = request.message or await coach.marketing_copy(lead, request.service_context)
    return OutreachMessage(
        lead_id=lead.id,
        message=message,
        whatsapp_url=whatsapp_link(lead.phone, message, region=region, desktop=request.desktop),
    )
