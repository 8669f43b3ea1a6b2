import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from studylog.utils.database import get_db
from studylog.services.exceptions import ServiceError
from studylog.services.member_service import MemberService, UserRole
from studylog.api.schemas.member_schemas import (
    MemberResponse, PasswordStatusResponse, PasswordSetRequest,
    LoginRequest, AuthContextResponse
)

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=List[MemberResponse])
async def list_members(db: Session = Depends(get_db)):
    """
    获取成员名单
    """
    return MemberService(db).list_members()

@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(member_id: str, db: Session = Depends(get_db)):
    """
    校验会员号并返回成员信息
    """
    try:
        return MemberService(db).get_member(member_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"获取成员信息失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="メンバー情報の取得に失敗しました"
        )

@router.get("/{member_id}/roles/{role}/password", response_model=PasswordStatusResponse)
async def get_password_status(member_id: str, role: UserRole, db: Session = Depends(get_db)):
    """
    保护者/指导者口令是否已设置
    """
    member_service = MemberService(db)
    return {
        "member_id": member_id,
        "role": role,
        "is_set": member_service.is_password_set(member_id, role),
    }

@router.put("/{member_id}/roles/{role}/password", response_model=PasswordStatusResponse)
async def set_password(member_id: str, role: UserRole, body: PasswordSetRequest,
                       db: Session = Depends(get_db)):
    """
    设置（或覆盖）口令
    """
    try:
        MemberService(db).set_password(member_id, role, body.password)
        return {"member_id": member_id, "role": role, "is_set": True}
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"设置口令失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="パスワードの設定に失敗しました"
        )

@router.delete("/{member_id}/roles/{role}/password", response_model=PasswordStatusResponse)
async def reset_password(member_id: str, role: UserRole, db: Session = Depends(get_db)):
    """
    重置口令（管理用）
    """
    MemberService(db).reset_password(member_id, role)
    return {"member_id": member_id, "role": role, "is_set": False}

@router.post("/{member_id}/login", response_model=AuthContextResponse)
async def login(member_id: str, body: LoginRequest, db: Session = Depends(get_db)):
    """
    登录，返回本次登录的认证上下文
    """
    try:
        return MemberService(db).login(member_id, body.role, body.password)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"登录失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="ログインに失敗しました"
        )
