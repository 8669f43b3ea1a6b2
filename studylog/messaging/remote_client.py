"""
远程消息生成客户端

把学习数据发给大模型，要求返回 {"messages": [{message, emoji, type} x3]}。
超时、API 错误、空响应、格式不符都以 GenerationError 报告给调用方；不做重试。
"""

import asyncio
import json
import logging
from typing import List, Optional

import openai
from pydantic import BaseModel, ValidationError, field_validator

from studylog.config.settings import settings
from studylog.messaging.prompts import build_prompt_messages
from studylog.messaging.values import PersonalizedMessage, StudyData, StudyHistory
from studylog.messaging.vocabulary import AudienceType, MessageType, expected_message_types
from studylog.utils.llm_client import LLMClient, create_llm_client

logger = logging.getLogger(__name__)

MESSAGES_PER_BATCH = 3
JSON_RESPONSE_FORMAT = {"type": "json_object"}


class GenerationError(Exception):
    """远程生成失败"""


class GenerationTransportError(GenerationError):
    """网络层失败（连接失败等）"""


class GenerationTimeoutError(GenerationTransportError):
    """超过时限未完成"""


class GenerationProtocolError(GenerationError):
    """服务端返回非成功状态"""


class GenerationParseError(GenerationError):
    """响应为空，或不是约定的 JSON 结构"""


class _ReplyMessage(BaseModel):
    message: str
    emoji: str
    type: MessageType

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message is blank")
        return value


class _GenerationReply(BaseModel):
    messages: List[_ReplyMessage]


def parse_generation_reply(content: Optional[str], audience: AudienceType) -> List[PersonalizedMessage]:
    """把模型输出解析为3条消息，不符合约定时抛出 GenerationParseError"""
    if content is None or not content.strip():
        raise GenerationParseError("empty response content")

    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise GenerationParseError(f"response is not valid JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("messages"), list):
        raise GenerationParseError("response has no 'messages' array")

    try:
        reply = _GenerationReply.model_validate(payload)
    except ValidationError as e:
        raise GenerationParseError(f"invalid message item: {e.error_count()} error(s)") from e

    if len(reply.messages) != MESSAGES_PER_BATCH:
        raise GenerationParseError(f"expected {MESSAGES_PER_BATCH} messages, got {len(reply.messages)}")

    expected = sorted(t.value for t in expected_message_types(audience))
    actual = sorted(item.type.value for item in reply.messages)
    if actual != expected:
        raise GenerationParseError(f"message types {actual} do not match {expected}")

    return [
        PersonalizedMessage(message=item.message, emoji=item.emoji, type=item.type)
        for item in reply.messages
    ]


class RemoteGenerationClient:
    """调用大模型生成3条个性化消息"""

    def __init__(self, llm_client: Optional[LLMClient] = None, timeout: Optional[float] = None,
                 temperature: Optional[float] = None, max_tokens: Optional[int] = None):
        self.llm_client = llm_client or create_llm_client()
        self.timeout = timeout if timeout is not None else settings.GENERATION_TIMEOUT
        self.temperature = temperature if temperature is not None else settings.OPENAI_TEMPERATURE
        self.max_tokens = max_tokens or settings.OPENAI_MAX_TOKENS

    async def request_messages(self, record: StudyData, history: StudyHistory,
                               audience: AudienceType) -> List[PersonalizedMessage]:
        audience = AudienceType(audience)
        prompt_messages = build_prompt_messages(record, history, audience)

        try:
            content = await asyncio.wait_for(
                self.llm_client.generate_response(
                    prompt_messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    response_format=JSON_RESPONSE_FORMAT,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationTimeoutError(f"no response within {self.timeout}s") from e
        except openai.APITimeoutError as e:
            raise GenerationTimeoutError(str(e)) from e
        except openai.APIConnectionError as e:
            raise GenerationTransportError(str(e)) from e
        except openai.APIStatusError as e:
            raise GenerationProtocolError(f"status {e.status_code}: {e.message}") from e
        except openai.APIError as e:
            raise GenerationProtocolError(str(e)) from e

        return parse_generation_reply(content, audience)
