import logging
import time
from typing import List, Dict, Optional

import openai

from studylog.config.settings import settings

logger = logging.getLogger(__name__)

class LLMClient:
    """大模型客户端，封装 OpenAI Chat Completions 的调用"""
    
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.OPENAI_MODEL
        self.base_url = base_url or settings.OPENAI_API_BASE
        self.max_tokens = settings.OPENAI_MAX_TOKENS
        self.timeout = timeout or settings.GENERATION_TIMEOUT
        
        # SDK 自带的重试关闭：一次调用失败就交给上层走模板消息
        self.client = openai.AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0
        )
        
        logger.info(f"LLM客户端初始化完成，模型: {self.model}")

    async def generate_response(self, messages: List[Dict[str, str]], 
                              temperature: float = 0.7,
                              max_tokens: Optional[int] = None,
                              response_format: Optional[Dict[str, str]] = None) -> Optional[str]:
        """
        调用大模型生成响应
        
        Args:
            messages: 消息列表，格式为 [{"role": "user", "content": "..."}]
            temperature: 生成温度
            max_tokens: 最大token数
            response_format: 输出格式，如 {"type": "json_object"}
            
        Returns:
            Optional[str]: 模型生成的文本，可能为空
        """
        logger.debug(f"调用LLM，消息数: {len(messages)}, 温度: {temperature}, 最大token数: {max_tokens or self.max_tokens}")
    
        try:
            start_time = time.time()
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or self.max_tokens,
                stream=False,
                **({"response_format": response_format} if response_format else {})
            )

            content = response.choices[0].message.content if response.choices else None
            usage = response.usage
            
            elapsed_time = time.time() - start_time
            logger.debug(f"LLM调用完成: {len(content or '')}字符, "
                        f"耗时: {elapsed_time:.2f}s, "
                        f"Token使用: {usage.total_tokens if usage else 'N/A'}")
            return content

        except openai.APITimeoutError as e:
            logger.error(f"LLM调用超时: {e}")
            raise
        except openai.APIError as e:
            logger.error(f"LLM API错误: {e}")
            raise


class MockLLMClient(LLMClient):
    """模拟LLM客户端，用于测试和未配置 API Key 的开发环境"""
    
    def __init__(self, response: Optional[str] = None):
        # 默认返回空内容，上层会按解析失败处理并使用模板消息
        self.response = response
        self.model = "mock"
        self.calls: List[List[Dict[str, str]]] = []
        logger.info("使用模拟LLM客户端")
    
    async def generate_response(self, messages: List[Dict[str, str]], 
                              temperature: float = 0.7,
                              max_tokens: Optional[int] = None,
                              response_format: Optional[Dict[str, str]] = None) -> Optional[str]:
        self.calls.append(messages)
        return self.response


def create_llm_client(use_mock: bool = False) -> LLMClient:
    """创建LLM客户端实例"""
    if use_mock or not settings.OPENAI_API_KEY:
        logger.info("未配置 OPENAI_API_KEY，使用模拟LLM客户端（开发模式）")
        return MockLLMClient()
    return LLMClient()
