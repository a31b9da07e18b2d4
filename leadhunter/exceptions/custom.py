class ProviderError(Exception):
    """A generative text provider call failed. Transient unless subclassed."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class RateLimitError(ProviderError):
    def __init__(self, service: str):
        self.service = service
        super().__init__(service, f"Rate limit exceeded for {service}", status_code=429)


class ProviderAuthError(ProviderError):
    """The provider rejected our credential. Retrying cannot succeed."""


class LeadNotFoundError(Exception):
    def __init__(self, lead_id: str):
        self.lead_id = lead_id
        super().__init__(f"Lead {lead_id} not found")
