from enum import Enum
from typing import Dict, Tuple


class Subject(str, Enum):
    """科目"""
    APTITUDE = "aptitude"
    JAPANESE = "japanese"
    MATH = "math"
    SCIENCE = "science"
    SOCIAL = "social"


class Emotion(str, Enum):
    """学习时的心情"""
    GOOD = "good"
    NORMAL = "normal"
    HARD = "hard"


class ContentType(str, Enum):
    CLASS = "class"          # 授業
    HOMEWORK = "homework"    # 宿題


class AudienceType(str, Enum):
    """消息的发送方（接收消息的是学生，措辞按发送方区分）"""
    PARENT = "parent"
    TEACHER = "teacher"


class MessageType(str, Enum):
    ENCOURAGING = "encouraging"
    SPECIFIC_PRAISE = "specific_praise"
    MOTIVATIONAL = "motivational"
    LOVING = "loving"
    INSTRUCTIONAL = "instructional"


class MessageSource(str, Enum):
    AI = "ai"
    FALLBACK = "fallback"


class ReactionType(str, Enum):
    CLAP = "clap"
    THUMBS = "thumbs"
    MUSCLE = "muscle"


SUBJECT_LABELS: Dict[str, str] = {
    Subject.APTITUDE.value: "適性",
    Subject.JAPANESE.value: "国語",
    Subject.MATH.value: "算数",
    Subject.SCIENCE.value: "理科",
    Subject.SOCIAL.value: "社会",
}

SUBJECT_ICONS: Dict[str, str] = {
    Subject.APTITUDE.value: "🧠",
    Subject.JAPANESE.value: "📚",
    Subject.MATH.value: "🔢",
    Subject.SCIENCE.value: "🔬",
    Subject.SOCIAL.value: "🌍",
}

EMOTION_LABELS: Dict[str, str] = {
    Emotion.GOOD.value: "よくできた",
    Emotion.NORMAL.value: "ふつう",
    Emotion.HARD.value: "むずかしかった",
}

EMOTION_EMOJIS: Dict[str, str] = {
    Emotion.GOOD.value: "😊",
    Emotion.NORMAL.value: "😐",
    Emotion.HARD.value: "😞",
}

CONTENT_TYPE_LABELS: Dict[str, str] = {
    ContentType.CLASS.value: "授業",
    ContentType.HOMEWORK.value: "宿題",
}

REACTION_LABELS: Dict[str, Tuple[str, str]] = {
    ReactionType.CLAP.value: ("👏", "すごい！"),
    ReactionType.THUMBS.value: ("👍", "いいね！"),
    ReactionType.MUSCLE.value: ("💪", "頑張って！"),
}

# 每种发送方固定的3个消息槽位：(类型, 表情)
AUDIENCE_SLOTS: Dict[AudienceType, Tuple[Tuple[MessageType, str], ...]] = {
    AudienceType.PARENT: (
        (MessageType.ENCOURAGING, "😊"),
        (MessageType.SPECIFIC_PRAISE, "🎯"),
        (MessageType.LOVING, "💝"),
    ),
    AudienceType.TEACHER: (
        (MessageType.ENCOURAGING, "📈"),
        (MessageType.INSTRUCTIONAL, "🎯"),
        (MessageType.MOTIVATIONAL, "💪"),
    ),
}


def _code(value) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def subject_label(subject) -> str:
    """科目代码 -> 显示名，未知代码原样返回"""
    code = _code(subject)
    return SUBJECT_LABELS.get(code, code)


def subject_icon(subject) -> str:
    return SUBJECT_ICONS.get(_code(subject), "📚")


def emotion_label(emotion) -> str:
    code = _code(emotion)
    return EMOTION_LABELS.get(code, code)


def expected_message_types(audience: AudienceType) -> Tuple[MessageType, ...]:
    return tuple(message_type for message_type, _ in AUDIENCE_SLOTS[AudienceType(audience)])
