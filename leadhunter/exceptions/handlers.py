import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import LeadNotFoundError, ProviderAuthError, ProviderError, RateLimitError

logger = logging.getLogger(__name__)


async def provider_error_handler(_request: Request, exc: ProviderError) -> JSONResponse:
    logger.error("%s error: %s (status=%s)", exc.provider, exc.message, exc.status_code)
    return JSONResponse(
        status_code=502,
        content={"detail": f"{exc.provider} error: {exc.message}"},
    )


async def provider_auth_error_handler(_request: Request, exc: ProviderAuthError) -> JSONResponse:
    logger.error("%s rejected credentials: %s (status=%s)", exc.provider, exc.message, exc.status_code)
    return JSONResponse(
        status_code=503,
        content={"detail": f"{exc.provider} credentials rejected, check the API key configuration"},
    )


async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning("Rate limit hit for %s", exc.service)
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded for {exc.service}"},
    )


async def lead_not_found_handler(_request: Request, exc: LeadNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"detail": f"Lead {exc.lead_id} not found"},
    )
