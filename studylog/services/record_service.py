import logging
from collections import Counter
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from studylog.config.settings import settings
from studylog.messaging.history import build_study_history, calculate_continuation_days
from studylog.messaging.values import StudyData, StudyHistory
from studylog.messaging.vocabulary import (
    CONTENT_TYPE_LABELS, EMOTION_EMOJIS, ContentType, Emotion, Subject, SUBJECT_LABELS,
    subject_icon, subject_label
)
from studylog.models.study_record import StudyRecord
from studylog.repositories.member_repository import MemberRepository
from studylog.repositories.study_record_repository import StudyRecordRepository
from studylog.services.exceptions import NotFoundError, ValidationError
from studylog.utils.helpers import calculate_accuracy, today_local

logger = logging.getLogger(__name__)

MAX_QUESTIONS = 100
MAX_COMMENT_LENGTH = 300
RECENT_EMOTION_DAYS = 5

SORT_FIELDS = ("date", "accuracy", "emotion")
EMOTION_ORDER = {Emotion.HARD.value: 0, Emotion.NORMAL.value: 1, Emotion.GOOD.value: 2}


class RecordService:
    """学习记录服务"""
    
    def __init__(self, db: Session):
        self.db = db
        self.record_repo = StudyRecordRepository(db)
        self.member_repo = MemberRepository(db)
    
    def create_record(self, member_id: str, subject: str, questions_total: int,
                      questions_correct: int, emotion: str, comment: Optional[str] = None,
                      content_type: str = ContentType.CLASS.value,
                      study_date: Optional[date] = None,
                      record_date: Optional[date] = None) -> StudyRecord:
        """
        提交学习记录
        
        Args:
            member_id: 会员号
            subject: 科目代码
            questions_total: 题数（1-100）
            questions_correct: 正答数（0-题数）
            emotion: 心情
            comment: 备注（300字以内）
            content_type: 授業/宿題
            study_date: 学习内容的实施日，默认与记录日相同
            record_date: 记录日，默认按配置时区的今天，不能晚于今天
            
        Returns:
            StudyRecord: 新建的记录
        """
        if not self.member_repo.get_by_member_id(member_id):
            raise NotFoundError(f"会員番号 {member_id} は登録されていません")
        
        self._validate(subject, questions_total, questions_correct, emotion, content_type)
        comment = (comment or "").strip() or None
        if comment and len(comment) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"コメントは{MAX_COMMENT_LENGTH}文字以内で入力してください")
        
        today = today_local()
        record_date = record_date or today
        if record_date > today:
            raise ValidationError("未来の日付では記録できません")
        study_date = study_date or record_date
        attempt_number = self.record_repo.get_max_attempt_number(
            member_id, study_date, subject, content_type
        ) + 1
        
        record = self.record_repo.create(
            member_id=member_id,
            date=record_date,
            study_date=study_date,
            subject=subject,
            content_type=content_type,
            attempt_number=attempt_number,
            questions_total=questions_total,
            questions_correct=questions_correct,
            emotion=emotion,
            comment=comment,
        )
        logger.info(f"学习记录已保存: 成员{member_id}, {subject} {questions_correct}/{questions_total}, 第{attempt_number}回")
        return record
    
    def get_record(self, record_id: int) -> StudyRecord:
        record = self.record_repo.get_by_id(record_id)
        if not record:
            raise NotFoundError(f"学習記録 {record_id} が見つかりません")
        return record
    
    def list_records(self, member_id: str, subject: Optional[str] = None,
                     sort: str = "date", order: str = "desc") -> List[StudyRecord]:
        """履历列表（附带反馈），可按科目筛选、按日期/正答率/心情排序"""
        if sort not in SORT_FIELDS:
            raise ValidationError(f"sort は {', '.join(SORT_FIELDS)} のいずれかです")
        if order not in ("asc", "desc"):
            raise ValidationError("order は asc か desc です")
        
        records = self.record_repo.get_member_records(member_id, subject=subject, with_feedbacks=True)
        reverse = order == "desc"
        
        if sort == "accuracy":
            key = lambda r: r.questions_correct / r.questions_total
        elif sort == "emotion":
            key = lambda r: EMOTION_ORDER.get(r.emotion, 1)
        else:
            key = lambda r: (r.study_date, r.date)
        # 仓库已按新到旧返回；sorted 稳定，同值时保持原顺序
        return sorted(records, key=key, reverse=reverse)
    
    def get_study_history(self, member_id: str, today: Optional[date] = None) -> StudyHistory:
        """最近 HISTORY_WINDOW_DAYS 天的学习履历"""
        today = today or today_local()
        since_date = today - timedelta(days=settings.HISTORY_WINDOW_DAYS)
        records = self.record_repo.get_records_since_date(member_id, since_date)
        return build_study_history(
            [StudyData.from_record(r) for r in records],
            today,
            recent_limit=settings.RECENT_RECORDS_LIMIT,
        )
    
    def get_dashboard(self, member_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        """
        仪表盘统计
        
        Returns:
            Dict: 连续天数、今日记录（含同一内容的挑战历史）、科目统计、
                  最近心情、周对比、总记录数
        """
        today = today or today_local()
        records = self.record_repo.get_member_records(member_id)
        
        return {
            "member_id": member_id,
            "today": today,
            "continue_days": calculate_continuation_days((r.date for r in records), today),
            "today_records": self._today_records(records, today),
            "subject_stats": self._subject_stats(records),
            "recent_emotions": self._recent_emotions(records),
            "weekly_comparison": self._weekly_comparison(records, today),
            "total_sessions": len(records),
        }
    
    @staticmethod
    def _validate(subject: str, questions_total: int, questions_correct: int,
                  emotion: str, content_type: str) -> None:
        if subject not in {s.value for s in Subject}:
            raise ValidationError(f"不明な科目です: {subject}")
        if emotion not in {e.value for e in Emotion}:
            raise ValidationError(f"不明な気持ちです: {emotion}")
        if content_type not in {c.value for c in ContentType}:
            raise ValidationError(f"不明な学習区分です: {content_type}")
        if not 1 <= questions_total <= MAX_QUESTIONS:
            raise ValidationError(f"問題数は1〜{MAX_QUESTIONS}で入力してください")
        if not 0 <= questions_correct <= questions_total:
            raise ValidationError("正答数は問題数以下にしてください")
    
    @staticmethod
    def _attempt_entry(record: StudyRecord) -> Dict[str, Any]:
        return {
            "attempt": record.attempt_number,
            "correct": record.questions_correct,
            "total": record.questions_total,
            "accuracy": calculate_accuracy(record.questions_correct, record.questions_total),
            "record_date": record.date,
            "emotion": record.emotion,
        }
    
    def _today_records(self, records: List[StudyRecord], today: date) -> List[Dict[str, Any]]:
        """今日记录，同一学习内容只保留今日最新的一次挑战"""
        latest_by_key: Dict[tuple, StudyRecord] = {}
        for record in records:
            if record.date != today:
                continue
            key = (record.study_date, record.subject, record.content_type)
            current = latest_by_key.get(key)
            if current is None or record.attempt_number > current.attempt_number:
                latest_by_key[key] = record
        
        result = []
        for key, latest in latest_by_key.items():
            history = sorted(
                (r for r in records
                 if (r.study_date, r.subject, r.content_type) == key and r.date <= latest.date),
                key=lambda r: r.attempt_number
            )
            attempts = [self._attempt_entry(r) for r in history]
            improvement = attempts[-1]["accuracy"] - attempts[0]["accuracy"] if len(attempts) > 1 else None
            result.append({
                "id": latest.id,
                "study_date": latest.study_date,
                "subject": latest.subject,
                "subject_label": subject_label(latest.subject),
                "content_type": latest.content_type,
                "content_type_label": CONTENT_TYPE_LABELS.get(latest.content_type, latest.content_type),
                "attempt_number": latest.attempt_number,
                "questions_total": latest.questions_total,
                "questions_correct": latest.questions_correct,
                "accuracy": calculate_accuracy(latest.questions_correct, latest.questions_total),
                "emotion": latest.emotion,
                "comment": latest.comment,
                "history": attempts,
                "improvement": improvement,
            })
        return result
    
    @staticmethod
    def _subject_stats(records: List[StudyRecord]) -> List[Dict[str, Any]]:
        """科目别统计，只返回有记录的科目"""
        stats = []
        for code in SUBJECT_LABELS:
            subject_records = [r for r in records if r.subject == code]
            total = sum(r.questions_total for r in subject_records)
            if total == 0:
                continue
            correct = sum(r.questions_correct for r in subject_records)
            stats.append({
                "subject": code,
                "label": subject_label(code),
                "icon": subject_icon(code),
                "total_questions": total,
                "total_correct": correct,
                "accuracy": calculate_accuracy(correct, total),
            })
        return stats
    
    @staticmethod
    def _recent_emotions(records: List[StudyRecord]) -> List[Dict[str, Any]]:
        """最近5个学习日各自最多的心情（同数时 good > normal > hard）"""
        by_date: Dict[date, Counter] = {}
        for record in records:
            by_date.setdefault(record.date, Counter())[record.emotion] += 1
        
        result = []
        for record_date in sorted(by_date, reverse=True)[:RECENT_EMOTION_DAYS]:
            counts = by_date[record_date]
            dominant = max(
                (e.value for e in Emotion),
                key=lambda e: (counts[e], EMOTION_ORDER[e])
            )
            result.append({"date": record_date, "emotion": dominant, "emoji": EMOTION_EMOJIS[dominant]})
        return result
    
    @staticmethod
    def _weekly_comparison(records: List[StudyRecord], today: date) -> Dict[str, Any]:
        """最近7天与之前7天的正答率对比"""
        this_week_start = today - timedelta(days=6)
        last_week_start = today - timedelta(days=13)
        
        def summarize(start: date, end: date) -> Dict[str, Any]:
            window = [r for r in records if start <= r.date <= end]
            total = sum(r.questions_total for r in window)
            correct = sum(r.questions_correct for r in window)
            return {
                "records": len(window),
                "total_questions": total,
                "total_correct": correct,
                "accuracy": calculate_accuracy(correct, total) if total else None,
            }
        
        this_week = summarize(this_week_start, today)
        last_week = summarize(last_week_start, this_week_start - timedelta(days=1))
        delta = None
        if this_week["accuracy"] is not None and last_week["accuracy"] is not None:
            delta = this_week["accuracy"] - last_week["accuracy"]
        return {"this_week": this_week, "last_week": last_week, "accuracy_delta": delta}
