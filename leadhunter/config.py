from pydantic import model_validator
from pydantic_settings import BaseSettings

from leadhunter.mappers.query_variation import QUERY_TEMPLATES


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    llm_provider: str = "gemini"  # "gemini" | "anthropic"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"

    search_max_attempts: int = 4
    search_over_request_ratio: float = 1.5
    search_fan_out: int = 1

    phone_region: str = ""  # ISO code, e.g. "BR"; empty = no country-code inference
    request_timeout: float = 60.0
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_provider_credentials(self) -> "Settings":
        provider = self.llm_provider.lower()
        if provider not in ("gemini", "anthropic"):
            raise ValueError(f"Unknown LLM_PROVIDER: {self.llm_provider!r}")
        if provider == "gemini" and not self.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required when LLM_PROVIDER=gemini")
        if provider == "anthropic" and not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required when LLM_PROVIDER=anthropic")
        if self.search_max_attempts < 1:
            raise ValueError("SEARCH_MAX_ATTEMPTS must be at least 1")
        if self.search_over_request_ratio < 1:
            raise ValueError("SEARCH_OVER_REQUEST_RATIO must be >= 1")
        if not 1 <= self.search_fan_out <= len(QUERY_TEMPLATES):
            raise ValueError(
                f"SEARCH_FAN_OUT must be between 1 and {len(QUERY_TEMPLATES)} (one call per query phrasing)"
            )
        self.llm_provider = provider
        return self
