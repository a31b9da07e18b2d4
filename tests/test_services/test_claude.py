from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from leadhunter.exceptions.custom import ProviderAuthError, ProviderError, RateLimitError
from leadhunter.schemas.lead import GroundingSource
from leadhunter.services.claude import ClaudeService

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _block(text: str, citations=None, block_type: str = "text"):
    block = MagicMock()
    block.type = block_type
    block.text = text
    block.citations = citations
    return block


def _citation(url: str, title: str):
    citation = MagicMock()
    citation.url = url
    citation.title = title
    return citation


def _make_response(*blocks):
    resp = MagicMock()
    resp.content = list(blocks)
    resp.stop_reason = "end_turn"
    return resp


def _status_error(cls, status: int):
    return cls("error", response=httpx.Response(status, request=_REQUEST), body=None)


@pytest.fixture
def service():
    return ClaudeService(api_key="test-key")


async def test_generate_success(service):
    mock_resp = _make_response(_block('[{"name": "A"}]'))
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, return_value=mock_resp) as create:
        result = await service.generate("find", system="sys", temperature=1.5)

    assert result.text == '[{"name": "A"}]'
    kwargs = create.call_args.kwargs
    assert kwargs["system"] == "sys"
    assert kwargs["temperature"] == 1.0
    assert kwargs["messages"] == [{"role": "user", "content": "find"}]
    assert "tools" not in kwargs


async def test_generate_web_search_collects_citations(service):
    mock_resp = _make_response(
        _block("", block_type="server_tool_use"),
        _block("Encontrei: ", citations=[_citation("https://guia.example", "Guia")]),
        _block('[{"name": "A"}]'),
    )
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, return_value=mock_resp) as create:
        result = await service.generate("find", web_search=True)

    assert result.text == 'Encontrei: [{"name": "A"}]'
    assert result.sources == [GroundingSource(title="Guia", uri="https://guia.example")]
    assert create.call_args.kwargs["tools"][0]["name"] == "web_search"


async def test_generate_json_output_adds_instruction(service):
    mock_resp = _make_response(_block("{}"))
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, return_value=mock_resp) as create:
        await service.generate("x", json_output=True)

    assert "JSON" in create.call_args.kwargs["system"]


@pytest.mark.parametrize("cls,status", [
    (anthropic.AuthenticationError, 401),
    (anthropic.PermissionDeniedError, 403),
])
async def test_generate_auth_errors(service, cls, status):
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, side_effect=_status_error(cls, status)):
        with pytest.raises(ProviderAuthError) as exc_info:
            await service.generate("x")
    assert exc_info.value.status_code == status


async def test_generate_rate_limit(service):
    err = _status_error(anthropic.RateLimitError, 429)
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, side_effect=err):
        with pytest.raises(RateLimitError):
            await service.generate("x")


async def test_generate_server_error(service):
    err = _status_error(anthropic.InternalServerError, 500)
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, side_effect=err):
        with pytest.raises(ProviderError) as exc_info:
            await service.generate("x")
    assert not isinstance(exc_info.value, ProviderAuthError)


async def test_generate_connection_error(service):
    err = anthropic.APIConnectionError(request=_REQUEST)
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, side_effect=err):
        with pytest.raises(ProviderError):
            await service.generate("x")


async def test_generate_empty_reply(service):
    mock_resp = _make_response(_block("   "))
    with patch.object(service._client.messages, "create", new_callable=AsyncMock, return_value=mock_resp):
        with pytest.raises(ProviderError):
            await service.generate("x")
