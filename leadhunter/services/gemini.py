import logging

import httpx

from leadhunter.exceptions.custom import ProviderAuthError, ProviderError, RateLimitError
from leadhunter.schemas.lead import GroundingSource
from leadhunter.schemas.provider import Generation

logger = logging.getLogger(__name__)

API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
MODEL = "gemini-2.5-flash"

_AUTH_MARKERS = ("API_KEY_INVALID", "API key not valid", "PERMISSION_DENIED")


def generate_url(model: str) -> str:
    return f"{API_BASE}/{model}:generateContent"


class GeminiService:
    name = "Gemini"

    def __init__(self, client: httpx.AsyncClient, api_key: str, model: str = MODEL):
        self._client = client
        self._headers = {"x-goog-api-key": api_key, "Content-Type": "application/json"}
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
        payload: dict = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        if web_search:
            payload["tools"] = [{"google_search": {}}]

        generation_config: dict = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        # Grounded calls can't be combined with a JSON mime type
        if json_output and not web_search:
            generation_config["responseMimeType"] = "application/json"
        if generation_config:
            payload["generationConfig"] = generation_config

        try:
            resp = await self._client.post(
                generate_url(self._model), json=payload, headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"{type(exc).__name__}: {exc}") from exc

        self._raise_for_status(resp)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError(self.name, "Response body is not JSON", resp.status_code) from exc
        return self._parse_response(data)

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.status_code < 400:
            return
        if resp.status_code in (401, 403) or any(m in resp.text for m in _AUTH_MARKERS):
            raise ProviderAuthError(self.name, resp.text, status_code=resp.status_code)
        if resp.status_code == 429:
            raise RateLimitError(self.name)
        raise ProviderError(self.name, resp.text, status_code=resp.status_code)

    def _parse_response(self, data: object) -> Generation:
        if not isinstance(data, dict):
            logger.warning("Gemini response is not a JSON object: %.200r", data)
            raise ProviderError(self.name, "Response body is not a JSON object")
        try:
            candidate = data["candidates"][0]
        except (KeyError, IndexError, TypeError):
            logger.warning("Gemini response has no candidates: %s", data.get("promptFeedback"))
            raise ProviderError(self.name, "Response has no candidates") from None
        if not isinstance(candidate, dict):
            raise ProviderError(self.name, "Response candidate is not a JSON object")

        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        text = "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict))

        sources: list[GroundingSource] = []
        metadata = candidate.get("groundingMetadata")
        chunks = metadata.get("groundingChunks") if isinstance(metadata, dict) else None
        for chunk in chunks if isinstance(chunks, list) else []:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if isinstance(web, dict) and web.get("uri") and web.get("title"):
                sources.append(GroundingSource(title=web["title"], uri=web["uri"]))

        if not text.strip():
            raise ProviderError(self.name, f"Empty response (finish={candidate.get('finishReason')})")

        logger.info(
            "Gemini returned %d chars, %d sources (finish=%s)",
            len(text), len(sources), candidate.get("finishReason"),
        )
        return Generation(text=text, sources=sources)
