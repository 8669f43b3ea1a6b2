import pytest

from studylog.messaging.vocabulary import (
    AudienceType, MessageType, Subject, expected_message_types, subject_label, subject_icon
)
from studylog.utils.helpers import calculate_accuracy, hash_password


@pytest.mark.parametrize("correct,total,expected", [
    (18, 20, 90),
    (7, 8, 88),     # 87.5 -> 88
    (5, 20, 25),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),     # 12.5 -> 13
    (0, 10, 0),
    (10, 10, 100),
])
def test_accuracy_rounds_half_up(correct, total, expected):
    assert calculate_accuracy(correct, total) == expected


def test_accuracy_with_no_questions_is_zero():
    assert calculate_accuracy(0, 0) == 0


def test_subject_labels():
    assert subject_label(Subject.APTITUDE) == "適性"
    assert subject_label("japanese") == "国語"
    assert subject_label("math") == "算数"
    assert subject_label("science") == "理科"
    assert subject_label("social") == "社会"


def test_unknown_subject_passes_through():
    assert subject_label("english") == "english"
    assert subject_icon("english") == "📚"


def test_audience_slot_types_are_fixed():
    assert expected_message_types(AudienceType.PARENT) == (
        MessageType.ENCOURAGING, MessageType.SPECIFIC_PRAISE, MessageType.LOVING
    )
    assert expected_message_types("teacher") == (
        MessageType.ENCOURAGING, MessageType.INSTRUCTIONAL, MessageType.MOTIVATIONAL
    )


def test_password_hash_depends_on_role():
    assert hash_password("11111111", "parent", "1234") != hash_password("11111111", "teacher", "1234")
    assert hash_password("11111111", "parent", "1234") == hash_password("11111111", "parent", "1234")
