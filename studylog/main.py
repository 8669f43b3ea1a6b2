#!/usr/bin/env python3
"""
Studyログ - FastAPI 主应用入口
Description: 学习记录、反馈、振り返り的 REST API，以及保护者/指导者用的个性化鼓励消息生成
"""

import logging
import platform
from contextlib import asynccontextmanager

import psutil
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studylog.config.settings import settings
from studylog.utils.logger import setup_logging
from studylog.utils.database import init_db, check_db_connection
from studylog.utils.helpers import format_timestamp
from studylog.services.exceptions import AuthenticationError, NotFoundError, ValidationError

# 设置日志
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    - 启动时初始化数据库（失败会按指数退避重试）
    - 关闭时记录日志
    """
    logger.info("初始化 Studyログ 应用...")
    
    try:
        init_db()
        logger.info("数据库初始化完成")
        
        if settings.OPENAI_API_KEY:
            logger.info(f"消息生成使用模型: {settings.OPENAI_MODEL}")
        else:
            logger.warning("未配置 OPENAI_API_KEY，个性化消息将全部使用模板生成")
        
        logger.info("Studyログ 应用启动完成")
        
    except Exception as e:
        logger.error(f"应用启动失败: {e}")
        raise
    
    yield
    
    logger.info("Studyログ 应用已关闭")

def create_application() -> FastAPI:
    """创建并配置FastAPI应用实例"""
    
    app = FastAPI(
        title=settings.APP_NAME,
        description="学習記録・フィードバック・振り返りと、個別最適化応援メッセージ生成のAPI",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    # 全局异常处理
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail}
        )
    
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})
    
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})
    
    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(status_code=401, content={"error": str(exc)})
    
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"未处理的异常: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "内部サーバーエラー"}
        )
    
    return app

# 创建应用实例
app = create_application()

from studylog.api.routes import members, records, feedbacks, messages, reflections

# 注册API路由
app.include_router(members.router, prefix="/api/v1/members", tags=["メンバー"])
app.include_router(records.router, prefix="/api/v1/records", tags=["学習記録"])
app.include_router(feedbacks.router, prefix="/api/v1/feedbacks", tags=["フィードバック"])
app.include_router(messages.router, prefix="/api/v1/messages", tags=["応援メッセージ"])
app.include_router(reflections.router, prefix="/api/v1/reflections", tags=["振り返り"])


# 健康检查端点
@app.get("/")
async def root():
    """根端点 - 服务状态检查"""
    return {
        "status": "running",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": format_timestamp()
    }

@app.get("/health")
async def health_check():
    """健康检查端点（大模型不可用时仍可用模板消息，不影响健康状态）"""
    db_status = check_db_connection()
    
    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "llm_service": "configured" if settings.OPENAI_API_KEY else "template_only",
        "timestamp": format_timestamp()
    }

@app.get("/api/v1/system/info")
async def system_info():
    """系统信息端点"""
    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "cpu_usage": psutil.cpu_percent(),
        "memory_usage": psutil.virtual_memory().percent,
        "llm_model": settings.OPENAI_MODEL,
        "generation_timeout": settings.GENERATION_TIMEOUT,
        "history_window_days": settings.HISTORY_WINDOW_DAYS,
        "timezone": settings.TIMEZONE
    }

if __name__ == "__main__":
    """开发环境直接运行"""
    uvicorn.run(
        "studylog.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
