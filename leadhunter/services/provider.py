from typing import Protocol

from leadhunter.schemas.provider import Generation


class TextProvider(Protocol):
    """A hosted LLM that turns one prompt into text (plus optional citations).

    Implementations raise ProviderAuthError for rejected credentials,
    RateLimitError for throttling and ProviderError for anything else.
    """

    name: str

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        web_search: bool = False,
        temperature: float | None = None,
        json_output: bool = False,
    ) -> Generation: ...
