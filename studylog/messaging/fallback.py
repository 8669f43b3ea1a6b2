"""
模板消息生成

远程生成失败时，用已知的学习数据填充固定模板，保证总能返回3条消息。
每个槽位有4种说法；选择哪一种由学习数据 + 时间戳算出的种子决定，
同样的成绩在不同时间打开时措辞会变化。传入 timestamp_ms 可固定结果。
"""

from typing import Dict, List, Optional, Tuple

from studylog.messaging.values import PersonalizedMessage, StudyData, StudyHistory
from studylog.messaging.vocabulary import (
    AUDIENCE_SLOTS, AudienceType, MessageSource, MessageType, subject_label
)
from studylog.utils.helpers import calculate_accuracy, current_millis

# 模板占位符: subject / accuracy / correct / total / days
TEMPLATE_BANK: Dict[AudienceType, Dict[MessageType, Tuple[str, ...]]] = {
    AudienceType.PARENT: {
        MessageType.ENCOURAGING: (
            "{subject}{accuracy}%、今日もよく頑張ったね😊",
            "{subject}{accuracy}%達成、素晴らしい努力だね😊",
            "{subject}で{accuracy}%、本当によく頑張ってる😊",
            "{subject}{accuracy}%、継続する力が立派だね😊",
        ),
        MessageType.SPECIFIC_PRAISE: (
            "{subject}{total}問中{correct}問正解、成長してるね🎯",
            "{subject}で{correct}/{total}問正解、力がついてる🎯",
            "{subject}{correct}問正解、確実に上達してるね🎯",
            "{subject}の{correct}問正解、頑張りが実ってる🎯",
        ),
        MessageType.LOVING: (
            "{days}日継続中、パパママも応援してるよ💝",
            "{days}日も続けて、本当に頑張り屋さんだね💝",
            "{days}日継続、その努力を誇らしく思うよ💝",
            "{days}日間コツコツと、素晴らしい姿勢だね💝",
        ),
    },
    AudienceType.TEACHER: {
        MessageType.ENCOURAGING: (
            "{subject}{accuracy}%、着実に力がついています📈",
            "{subject}で{accuracy}%達成、順調な成長です📈",
            "{subject}{accuracy}%、確実にレベルアップしています📈",
            "{subject}の{accuracy}%、基礎力が定着してきました📈",
        ),
        MessageType.INSTRUCTIONAL: (
            "{subject}{total}問中{correct}問正解、素晴らしいです🎯",
            "{subject}で{correct}/{total}問正解、理解が深まっています🎯",
            "{subject}{correct}問正解、学習効果が表れています🎯",
            "{subject}の{correct}問正解、着実な進歩です🎯",
        ),
        MessageType.MOTIVATIONAL: (
            "{days}日継続、この調子で次のステップへ💪",
            "{days}日間の継続、継続力が素晴らしいです💪",
            "{days}日続けて、学習習慣が定着していますね💪",
            "{days}日継続中、この momentum を大切に💪",
        ),
    },
}


def variant_seed(record: StudyData, timestamp_ms: int) -> int:
    """学习数据 + 时间戳各字符编码之和，取 0-99"""
    emotion = getattr(record.emotion, "value", record.emotion)
    seed_source = (
        f"{record.subject}_{record.date.isoformat()}_{record.questions_correct}_"
        f"{record.questions_total}_{emotion}_{timestamp_ms}"
    )
    return sum(ord(char) for char in seed_source) % 100


def fallback_messages(record: StudyData, history: StudyHistory, audience: AudienceType,
                      timestamp_ms: Optional[int] = None) -> List[PersonalizedMessage]:
    """生成3条模板消息（不会抛出异常）"""
    audience = AudienceType(audience)
    if timestamp_ms is None:
        timestamp_ms = current_millis()

    values = {
        "subject": subject_label(record.subject),
        "accuracy": calculate_accuracy(record.questions_correct, record.questions_total),
        "correct": record.questions_correct,
        "total": record.questions_total,
        "days": history.continuation_days,
    }
    seed = variant_seed(record, timestamp_ms)

    messages = []
    # 第2、3个槽位依次错开1、2位，避免三条挑到相近的说法
    for offset, (message_type, emoji) in enumerate(AUDIENCE_SLOTS[audience]):
        bank = TEMPLATE_BANK[audience][message_type]
        template = bank[(seed + offset) % len(bank)]
        messages.append(PersonalizedMessage(
            message=template.format(**values),
            emoji=emoji,
            type=message_type,
            source=MessageSource.FALLBACK,
        ))
    return messages
