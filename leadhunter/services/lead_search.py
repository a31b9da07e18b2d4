import asyncio
import logging
import math
from collections.abc import Iterable

from leadhunter.exceptions.custom import ProviderAuthError
from leadhunter.mappers.json_extract import extract_json_array
from leadhunter.mappers.lead_filters import matches_filters, normalize_name
from leadhunter.mappers.lead_sanitizer import sanitize_lead
from leadhunter.mappers.phone import PhoneRegion
from leadhunter.mappers.prompt_builder import build_search_prompt
from leadhunter.mappers.query_variation import query_phrasing
from leadhunter.schemas.coaching import ServiceContext
from leadhunter.schemas.lead import BusinessSize, GroundingSource, Lead, SearchFilters, SearchResult
from leadhunter.schemas.provider import Generation
from leadhunter.services.provider import TextProvider

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 4
OVER_REQUEST_RATIO = 1.5


def assemble_result(
    leads: list[Lead],
    sources: list[GroundingSource],
    target_count: int,
    attempts: int,
) -> SearchResult:
    """Final response: leads capped at ``target_count``, every source kept."""
    return SearchResult(leads=list(leads[:target_count]), sources=list(sources), attempts=attempts)


class LeadSearchService:
    def __init__(
        self,
        provider: TextProvider,
        max_attempts: int = MAX_ATTEMPTS,
        over_request_ratio: float = OVER_REQUEST_RATIO,
        fan_out: int = 1,
        region: PhoneRegion | None = None,
    ):
        self._provider = provider
        self._max_attempts = max_attempts
        self._over_request_ratio = over_request_ratio
        self._fan_out = fan_out
        self._region = region

    async def search(
        self,
        niche: str,
        location: str,
        size: BusinessSize = BusinessSize.small,
        target_count: int = 10,
        existing_names: Iterable[str] = (),
        filters: SearchFilters | None = None,
        custom_instruction: str | None = None,
        service_context: ServiceContext | None = None,
    ) -> SearchResult:
        """Call the provider until ``target_count`` usable leads are collected.

        Stops early once the target is met, or after ``max_attempts`` calls.
        A short or empty result is a normal outcome. Transient provider
        failures skip the attempt; ProviderAuthError propagates at once.
        """
        if target_count < 1:
            raise ValueError("target_count must be a positive integer")
        size = BusinessSize(size)
        filters = filters or SearchFilters()

        excluded = [n.strip() for n in existing_names if n and n.strip()]
        seen: set[str] = {normalize_name(n) for n in excluded}
        collected: list[Lead] = []
        sources: list[GroundingSource] = []
        attempts = 0

        while len(collected) < target_count and attempts < self._max_attempts:
            attempts += 1
            remaining = target_count - len(collected)
            request_count = math.ceil(remaining * self._over_request_ratio)

            prompts = [
                build_search_prompt(
                    query=query_phrasing((attempts - 1) * self._fan_out + i, niche, location),
                    niche=niche,
                    location=location,
                    size=size,
                    request_count=request_count,
                    excluded_names=excluded,
                    filters=filters,
                    custom_instruction=custom_instruction,
                    service=service_context,
                )
                for i in range(self._fan_out)
            ]
            generations = await self._run_attempt(attempts, prompts)

            accepted = rejected = 0
            for generation in generations:
                sources.extend(generation.sources)
                for raw in extract_json_array(generation.text):
                    lead = sanitize_lead(raw, self._region)
                    key = normalize_name(lead.name)
                    if (
                        lead.normalized_phone is None
                        or key in seen
                        or not matches_filters(lead, filters, self._region)
                    ):
                        rejected += 1
                        continue
                    seen.add(key)
                    excluded.append(lead.name)
                    collected.append(lead)
                    accepted += 1

            logger.info(
                "Search %r in %r attempt %d/%d: accepted=%d rejected=%d total=%d/%d",
                niche, location, attempts, self._max_attempts,
                accepted, rejected, len(collected), target_count,
            )

        if len(collected) < target_count:
            logger.info(
                "Search %r in %r finished short: %d/%d after %d attempts",
                niche, location, len(collected), target_count, attempts,
            )
        return assemble_result(collected, sources, target_count, attempts)

    async def _run_attempt(self, attempt: int, prompts: list[str]) -> list[Generation]:
        results = await asyncio.gather(
            *(self._provider.generate(p, web_search=True) for p in prompts),
            return_exceptions=True,
        )

        generations: list[Generation] = []
        for res in results:
            if isinstance(res, ProviderAuthError):
                logger.error("Provider rejected credentials on attempt %d, aborting search", attempt)
                raise res
            if isinstance(res, BaseException):
                logger.warning(
                    "Provider call failed on attempt %d: %s: %s", attempt, type(res).__name__, res
                )
                continue
            generations.append(res)
        return generations
