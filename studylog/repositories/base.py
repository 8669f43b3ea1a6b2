from typing import List, Optional, TypeVar, Generic
from sqlalchemy.orm import Query, Session

T = TypeVar('T')

class BaseRepository(Generic[T]):
    """Repository 基类：按主键的增改删，以及按成员限定的查询"""
    
    def __init__(self, db: Session, model_class: T):
        self.db = db
        self.model_class = model_class
    
    def get_by_id(self, id: int) -> Optional[T]:
        return self.db.get(self.model_class, id)
    
    def create(self, **kwargs) -> T:
        """新建并提交，返回刷新后的对象（含 id / created_at）"""
        instance = self.model_class(**kwargs)
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance
    
    def update(self, id: int, **kwargs) -> Optional[T]:
        """按主键更新字段；记录不存在时返回 None"""
        instance = self.get_by_id(id)
        if instance is None:
            return None
        for key, value in kwargs.items():
            setattr(instance, key, value)
        self.db.commit()
        self.db.refresh(instance)
        return instance
    
    def delete_instance(self, instance: T) -> None:
        self.db.delete(instance)
        self.db.commit()
    
    def for_member(self, member_id: str) -> Query:
        """限定为某个会员号的查询（模型需有 member_id 列）"""
        return self.db.query(self.model_class).filter(self.model_class.member_id == member_id)
    
    def get_first_by(self, **filters) -> Optional[T]:
        """等值条件的第一条记录"""
        return self.db.query(self.model_class).filter_by(**filters).first()
    
    def list_member(self, member_id: str, *order_by) -> List[T]:
        return self.for_member(member_id).order_by(*order_by).all()
