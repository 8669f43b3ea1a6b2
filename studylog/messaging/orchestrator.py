import logging
from typing import Callable, List, Optional

from studylog.messaging.fallback import fallback_messages
from studylog.messaging.remote_client import GenerationError, RemoteGenerationClient
from studylog.messaging.values import PersonalizedMessage, StudyData, StudyHistory
from studylog.messaging.vocabulary import AudienceType, MessageSource
from studylog.utils.helpers import calculate_accuracy, generate_request_id

logger = logging.getLogger(__name__)


class MessageOrchestrator:
    """
    个性化消息生成入口
    - 先请求远程生成，成功则标记 source=ai 原样返回
    - 任何失败都记录日志并改用模板消息，标记 source=fallback
    - 对调用方不抛出异常，总是返回3条消息
    """

    def __init__(self, remote_client: Optional[RemoteGenerationClient] = None,
                 fallback: Callable[..., List[PersonalizedMessage]] = fallback_messages):
        self.remote_client = remote_client or RemoteGenerationClient()
        self.fallback = fallback

    async def generate_personalized_messages(self, record: StudyData, history: StudyHistory,
                                             audience: AudienceType) -> List[PersonalizedMessage]:
        audience = AudienceType(audience)
        request_id = generate_request_id()
        logger.info(
            f"[{request_id}] 开始生成个性化消息: 科目={record.subject}, 发送方={audience.value}, "
            f"正答={record.questions_correct}/{record.questions_total}"
            f"({calculate_accuracy(record.questions_correct, record.questions_total)}%), "
            f"连续天数={history.continuation_days}, 学习天数={history.total_days}"
        )

        try:
            messages = await self.remote_client.request_messages(record, history, audience)
            logger.info(f"[{request_id}] 远程生成成功: {len(messages)}条")
            return [m.model_copy(update={"source": MessageSource.AI}) for m in messages]
        except GenerationError as e:
            logger.warning(f"[{request_id}] 远程生成失败({type(e).__name__}): {e}，使用模板消息")
        except Exception as e:
            logger.error(f"[{request_id}] 远程生成出现未预期错误: {e}，使用模板消息", exc_info=True)

        return self.fallback(record, history, audience)
