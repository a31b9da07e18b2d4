import logging

from leadhunter.exceptions.custom import LeadNotFoundError
from leadhunter.schemas.lead import Lead, LeadStatus
from leadhunter.schemas.responses import PipelineSummary

logger = logging.getLogger(__name__)

STAGES = (LeadStatus.new, LeadStatus.contacted, LeadStatus.negotiation, LeadStatus.closed)


class LeadPipeline:
    """Saved leads, keyed by id, in the order they were saved."""

    def __init__(self) -> None:
        self._leads: dict[str, Lead] = {}

    def save(self, lead: Lead) -> Lead:
        if existing := self._leads.get(lead.id):
            return existing
        self._leads[lead.id] = lead
        logger.info("Saved lead %s (%s)", lead.id, lead.name)
        return lead

    def get(self, lead_id: str) -> Lead:
        try:
            return self._leads[lead_id]
        except KeyError:
            raise LeadNotFoundError(lead_id) from None

    def remove(self, lead_id: str) -> None:
        if self._leads.pop(lead_id, None) is None:
            raise LeadNotFoundError(lead_id)

    def clear(self) -> int:
        count = len(self._leads)
        self._leads.clear()
        return count

    def list_leads(self, status: LeadStatus | None = None) -> list[Lead]:
        return [lead for lead in self._leads.values() if status is None or lead.status == status]

    def names(self) -> list[str]:
        return [lead.name for lead in self._leads.values()]

    def set_status(self, lead_id: str, status: LeadStatus) -> Lead:
        lead = self.get(lead_id)
        if lead.status != status:
            logger.info("Lead %s: %s -> %s", lead_id, lead.status, status)
            lead.status = status
        return lead

    def advance(self, lead_id: str) -> Lead:
        """Move a lead one stage forward; closed leads stay closed."""
        lead = self.get(lead_id)
        idx = STAGES.index(lead.status)
        return self.set_status(lead_id, STAGES[min(idx + 1, len(STAGES) - 1)])

    def attach_audit(self, lead_id: str, audit: str) -> Lead:
        lead = self.get(lead_id)
        lead.audit = audit
        return lead

    def summary(self, ticket_value: float = 0.0) -> PipelineSummary:
        ticket = max(ticket_value, 0.0)
        leads = list(self._leads.values())
        by_status = {stage: 0 for stage in STAGES}
        for lead in leads:
            by_status[lead.status] += 1
        return PipelineSummary(
            saved=len(leads),
            valid_phones=sum(1 for lead in leads if lead.normalized_phone),
            by_status=by_status,
            ticket_value=ticket,
            potential_revenue=len(leads) * ticket,
        )
