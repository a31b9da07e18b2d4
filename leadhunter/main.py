import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from leadhunter.config import Settings
from leadhunter.exceptions.custom import (
    LeadNotFoundError,
    ProviderAuthError,
    ProviderError,
    RateLimitError,
)
from leadhunter.exceptions.handlers import (
    lead_not_found_handler,
    provider_auth_error_handler,
    provider_error_handler,
    rate_limit_error_handler,
)
from leadhunter.jobs import JobStore
from leadhunter.mappers.phone import get_region
from leadhunter.routers.coaching import router as coaching_router
from leadhunter.routers.pipeline import router as pipeline_router
from leadhunter.routers.search import router as search_router
from leadhunter.services.claude import ClaudeService
from leadhunter.services.coaching import SalesCoachService
from leadhunter.services.gemini import GeminiService
from leadhunter.services.lead_search import LeadSearchService
from leadhunter.services.pipeline import LeadPipeline
from leadhunter.services.provider import TextProvider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    region = get_region(settings.phone_region)

    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        provider: TextProvider
        if settings.llm_provider == "anthropic":
            provider = ClaudeService(
                settings.anthropic_api_key,
                model=settings.anthropic_model,
                timeout=settings.request_timeout,
            )
        else:
            provider = GeminiService(client, settings.gemini_api_key, model=settings.gemini_model)
        logger.info("Using %s as text provider", provider.name)

        app.state.search_service = LeadSearchService(
            provider,
            max_attempts=settings.search_max_attempts,
            over_request_ratio=settings.search_over_request_ratio,
            fan_out=settings.search_fan_out,
            region=region,
        )
        app.state.coach = SalesCoachService(provider)
        app.state.pipeline = LeadPipeline()
        app.state.job_store = JobStore()
        app.state.phone_region = region

        yield


app = FastAPI(title="Lead Hunter", lifespan=lifespan)

app.add_exception_handler(ProviderAuthError, provider_auth_error_handler)
app.add_exception_handler(RateLimitError, rate_limit_error_handler)
app.add_exception_handler(ProviderError, provider_error_handler)
app.add_exception_handler(LeadNotFoundError, lead_not_found_handler)

app.include_router(search_router)
app.include_router(pipeline_router)
app.include_router(coaching_router)
