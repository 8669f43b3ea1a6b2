import os
from datetime import date

# 测试环境配置需要在导入 studylog 之前设置
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_studylog.db")
os.environ.setdefault("LOG_DIR", "logs")
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studylog.main import app
from studylog.models.base import Base
from studylog.utils.database import get_db, init_base_members
from studylog.api.dependencies import get_message_orchestrator
from studylog.messaging.orchestrator import MessageOrchestrator
from studylog.messaging.remote_client import RemoteGenerationClient
from studylog.messaging.values import StudyData
from studylog.utils.llm_client import MockLLMClient

# 测试数据库（内存 SQLite，所有连接共用同一个库）
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

MEMBER_ID = "11111111"


@pytest.fixture(scope="function")
def db_session():
    """创建测试数据库会话（含初始成员）"""
    import studylog.models.member  # noqa: F401
    import studylog.models.study_record  # noqa: F401
    import studylog.models.feedback  # noqa: F401
    import studylog.models.reflection  # noqa: F401
    import studylog.models.generated_message  # noqa: F401

    Base.metadata.create_all(bind=engine)
    init_base_members(TestingSessionLocal)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mock_llm():
    return MockLLMClient()


@pytest.fixture
def orchestrator(mock_llm):
    return MessageOrchestrator(RemoteGenerationClient(llm_client=mock_llm, timeout=1))


@pytest.fixture(scope="function")
def client(db_session, orchestrator):
    """创建测试客户端"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_message_orchestrator] = lambda: orchestrator
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def math_record():
    return StudyData(
        subject="math",
        questions_total=20,
        questions_correct=18,
        emotion="good",
        date=date(2024, 5, 1),
    )
