from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from studylog.utils.llm_client import LLMClient


def completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=None,
    )


@pytest.mark.asyncio
async def test_json_mode_is_passed_to_chat_completion(monkeypatch):
    llm = LLMClient(api_key="test-key", model="gpt-4o-mini")
    create = AsyncMock(return_value=completion('{"messages": []}'))
    monkeypatch.setattr(llm.client.chat.completions, "create", create)

    content = await llm.generate_response(
        [{"role": "user", "content": "hi"}], response_format={"type": "json_object"}
    )

    assert content == '{"messages": []}'
    assert create.call_args.kwargs["response_format"] == {"type": "json_object"}
    assert create.call_args.kwargs["model"] == "gpt-4o-mini"


@pytest.mark.asyncio
async def test_plain_text_call_has_no_response_format(monkeypatch):
    llm = LLMClient(api_key="test-key")
    create = AsyncMock(return_value=completion("OK"))
    monkeypatch.setattr(llm.client.chat.completions, "create", create)

    assert await llm.generate_response([{"role": "user", "content": "hi"}]) == "OK"
    assert "response_format" not in create.call_args.kwargs
