import httpx
import pytest
from httpx import ASGITransport

from leadhunter.schemas.provider import Generation


class StubProvider:
    """Provider double that replays scripted replies, one per call.

    Each script item is either a reply text, a Generation, or an exception
    to raise. Once the script is exhausted the last item repeats.
    """

    name = "Stub"

    def __init__(self, *script):
        self.script = list(script)
        self.prompts: list[str] = []
        self.calls: list[dict] = []

    async def generate(self, prompt, **kwargs) -> Generation:
        self.prompts.append(prompt)
        self.calls.append(kwargs)
        idx = min(len(self.prompts) - 1, len(self.script) - 1)
        item = self.script[idx]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, Generation):
            return item
        return Generation(text=item)


@pytest.fixture
def stub_provider_cls():
    return StubProvider


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setenv("PHONE_REGION", "BR")
    monkeypatch.setenv("SEARCH_MAX_ATTEMPTS", "3")


@pytest.fixture
async def client(mock_env):
    from leadhunter.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
