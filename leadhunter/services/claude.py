import logging

import anthropic
from anthropic import AsyncAnthropic

from leadhunter.exceptions.custom import ProviderAuthError, ProviderError, RateLimitError
from leadhunter.schemas.lead import GroundingSource
from leadhunter.schemas.provider import Generation

logger = logging.getLogger(__name__)

MODEL = "claude-sonnet-4-20250514"
MAX_TOKENS = 4096

_WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}


class ClaudeService:
    name = "Anthropic"

    def __init__(self, api_key: str, model: str = MODEL, timeout: float = 60.0):
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self._model = model

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        web_search: bool = False,
        temperature: float | None = None,
        json_output: bool = False,
    ) -> Generation:
        kwargs: dict = {
            "model": self._model,
            "max_tokens": MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }
        system_parts = [p for p in (system, "Respond ONLY with valid JSON." if json_output else None) if p]
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)
        if web_search:
            kwargs["tools"] = [_WEB_SEARCH_TOOL]
        if temperature is not None:
            # Anthropic caps temperature at 1.0
            kwargs["temperature"] = min(temperature, 1.0)

        try:
            response = await self._client.messages.create(**kwargs)
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as exc:
            raise ProviderAuthError(self.name, str(exc), status_code=exc.status_code) from exc
        except anthropic.RateLimitError as exc:
            raise RateLimitError(self.name) from exc
        except anthropic.APIStatusError as exc:
            raise ProviderError(self.name, str(exc), status_code=exc.status_code) from exc
        except anthropic.APIError as exc:
            raise ProviderError(self.name, f"{type(exc).__name__}: {exc}") from exc

        return self._parse_response(response)

    def _parse_response(self, response) -> Generation:
        texts: list[str] = []
        sources: list[GroundingSource] = []
        for block in response.content:
            if getattr(block, "type", None) != "text":
                continue
            texts.append(block.text)
            for citation in getattr(block, "citations", None) or []:
                url = getattr(citation, "url", None)
                title = getattr(citation, "title", None)
                if url and title:
                    sources.append(GroundingSource(title=title, uri=url))

        text = "".join(texts)
        if not text.strip():
            raise ProviderError(self.name, f"Empty response (stop_reason={response.stop_reason})")

        logger.info("Claude returned %d chars, %d sources", len(text), len(sources))
        return Generation(text=text, sources=sources)
