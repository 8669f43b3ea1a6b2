from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from tenacity import retry, stop_after_attempt, wait_exponential
import logging

from studylog.config.settings import settings

logger = logging.getLogger(__name__)

# 初始成员名单（会员号 -> 姓名）
BASE_MEMBERS = [
    {"member_id": "68442921", "name": "齋藤大洋"},
    {"member_id": "68905181", "name": "齋藤利嵩"},
    {"member_id": "67022243", "name": "笹島実弥子"},
    {"member_id": "68923295", "name": "杉山翔哉"},
    {"member_id": "68923309", "name": "杉山愛翔"},
    {"member_id": "77777777", "name": "德田創大"},
    {"member_id": "68883679", "name": "深作巴"},
    {"member_id": "68895933", "name": "福地美鈴"},
    {"member_id": "68805713", "name": "松下颯真"},
    {"member_id": "11111111", "name": "テスト生徒１"},
    {"member_id": "22222222", "name": "テスト生徒２"},
    {"member_id": "33333333", "name": "テスト生徒３"},
    {"member_id": "44444444", "name": "テスト生徒４"},
    {"member_id": "55555555", "name": "テスト生徒５"},
    {"member_id": "66666666", "name": "テスト生徒６"},
]

def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 3600}

# 创建数据库引擎
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # 在DEBUG模式下输出SQL语句
    **_engine_kwargs(settings.DATABASE_URL),
)

# 创建SessionLocal类
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"数据库会话错误: {e}")
        db.rollback()
        raise
    finally:
        db.close()

def check_db_connection() -> bool:
    """检查数据库连接是否正常"""
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        return True
    except Exception as e:
        logger.error(f"数据库连接检查失败: {e}")
        return False

@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True
)
def init_db(bind=None):
    """初始化数据库表并写入初始成员"""
    try:
        from studylog.models.base import Base
        from studylog.models.member import Member, RolePassword
        from studylog.models.study_record import StudyRecord
        from studylog.models.feedback import Feedback
        from studylog.models.reflection import Reflection
        from studylog.models.generated_message import GeneratedMessage
        
        target = bind or engine
        Base.metadata.create_all(bind=target)
        logger.info("数据库表初始化完成")
        
        init_base_members(sessionmaker(autocommit=False, autoflush=False, bind=target))
        
    except Exception as e:
        logger.error(f"数据库初始化失败: {e}")
        raise

def init_base_members(session_factory=None):
    """写入初始成员名单（已存在的跳过）"""
    from studylog.repositories.member_repository import MemberRepository

    db = (session_factory or SessionLocal)()
    try:
        member_repo = MemberRepository(db)
        for member_data in BASE_MEMBERS:
            if not member_repo.get_by_member_id(member_data["member_id"]):
                member_repo.create(**member_data)
                logger.info(f"初始化成员 {member_data['member_id']}")
    except Exception as e:
        db.rollback()
        logger.error(f"初始化成员数据失败: {e}")
        raise
    finally:
        db.close()
