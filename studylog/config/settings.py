from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    """应用配置"""
    
    # 应用配置
    APP_NAME: str = "Studyログ 学習記録サービス"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    
    # 数据库配置
    DATABASE_URL: str = "sqlite:///./studylog.db"
    
    # 大模型配置（OpenAI 兼容接口）
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_API_BASE: Optional[str] = None
    OPENAI_MAX_TOKENS: int = 800
    OPENAI_TEMPERATURE: float = 0.6
    
    # 生成超时（秒），超时后直接使用模板消息
    GENERATION_TIMEOUT: float = 15.0
    
    # 学习履历配置
    HISTORY_WINDOW_DAYS: int = 30
    RECENT_RECORDS_LIMIT: int = 5
    TIMEZONE: str = "Asia/Tokyo"
    
    # 简易认证配置
    MIN_PASSWORD_LENGTH: int = 4
    
    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    
    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
    LOG_DIR: str = "logs"
    LOG_FILE: str = "studylog.log"
    
    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

# 创建全局配置实例
settings = Settings()
