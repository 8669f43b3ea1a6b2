"""
学习履历汇总

把某个学生的学习记录（任意顺序）汇总成 StudyHistory：
学习天数、连续天数、科目别累计正答数/题数、最近5条记录。
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from studylog.messaging.values import StudyData, StudyHistory, SubjectAccuracy

RECENT_RECORDS_LIMIT = 5


def calculate_continuation_days(dates: Iterable[date], today: date) -> int:
    """
    从 today 往前数，每天都有记录的连续天数。
    today 没有记录时为 0。
    """
    studied = set(dates)
    count = 0
    current = today
    while current in studied:
        count += 1
        current -= timedelta(days=1)
    return count


def calculate_streak_days(dates: Iterable[date], until: Optional[date] = None) -> int:
    """
    从最近一个学习日往前数的连续天数（反馈用）。
    有记录时至少为 1；until 之后的日期不计入。
    """
    studied = {d for d in dates if until is None or d <= until}
    if not studied:
        return 0
    return calculate_continuation_days(studied, max(studied))


def build_study_history(records: Sequence[StudyData], today: date,
                        recent_limit: int = RECENT_RECORDS_LIMIT) -> StudyHistory:
    """
    汇总学习履历

    Args:
        records: 同一学生的学习记录。同一天内的多条记录保持传入顺序，
            调用方应按新到旧传入（仓库查询即是此顺序）
        today: 连续天数只统计这一天及之前的记录
        recent_limit: 最近记录条数上限
    """
    unique_dates = {record.date for record in records}

    subject_accuracy = {}
    for record in records:
        stats = subject_accuracy.setdefault(record.subject, SubjectAccuracy())
        stats.correct += record.questions_correct
        stats.total += record.questions_total

    recent_records: List[StudyData] = sorted(
        records, key=lambda r: r.date, reverse=True
    )[:recent_limit]

    return StudyHistory(
        recent_records=recent_records,
        total_days=len(unique_dates),
        continuation_days=calculate_streak_days(unique_dates, until=today),
        subject_accuracy=subject_accuracy,
    )


def degenerate_history(record: StudyData) -> StudyHistory:
    """拿不到真实履历时，仅用当前这条记录构造的履历"""
    return StudyHistory(
        recent_records=[record],
        total_days=1,
        continuation_days=1,
        subject_accuracy={
            record.subject: SubjectAccuracy(
                correct=record.questions_correct,
                total=record.questions_total,
            )
        },
    )
