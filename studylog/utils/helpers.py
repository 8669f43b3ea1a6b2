import hashlib
import time
import uuid
from datetime import datetime, date

import pytz

from studylog.config.settings import settings

def calculate_accuracy(correct: int, total: int) -> int:
    """正答率（%），四舍五入（0.5 进位），使用整数运算避免浮点误差"""
    if total <= 0:
        return 0
    return (correct * 200 + total) // (total * 2)

def today_local(tz_name: str = None) -> date:
    """按配置时区返回今天的日期"""
    tz = pytz.timezone(tz_name or settings.TIMEZONE)
    return datetime.now(tz).date()

def format_timestamp(dt: datetime = None) -> str:
    """格式化时间戳"""
    if not dt:
        dt = datetime.now(pytz.utc)
    return dt.isoformat()

def current_millis() -> int:
    """当前时间（毫秒）"""
    return int(time.time() * 1000)

def generate_request_id() -> str:
    """生成请求ID，用于串联一次消息生成的日志"""
    return f"{current_millis()}_{uuid.uuid4().hex[:9]}"

def hash_password(member_id: str, role: str, password: str) -> str:
    """简易口令哈希（仅作为家庭内的简单门槛，不是访问控制）"""
    raw = f"{member_id}:{role}:{password}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
