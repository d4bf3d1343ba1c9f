from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy.orm import Session

# 导入SQLAlchemy模型基类
from participation.db.base_class import Base

# 定义泛型类型变量
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        具有默认创建、读取、更新、删除（CRUD）操作的CRUD对象。

        **参数**

        * `model`: SQLAlchemy模型类
        """
        self.model = model

    def get(self, db: Session, obj_id: Any) -> Optional[ModelType]:
        """
        通过ID获取单个记录。

        Returns:
            Optional[ModelType]: 找到的记录，如果不存在则返回None
        """
        if obj_id is None:
            return None
        return db.get(self.model, obj_id)

    def get_all(self, db: Session, *, order_by: Optional[Any] = None) -> List[ModelType]:
        """获取全部记录，order_by 为SQLAlchemy排序表达式，例如 desc(Model.created_at)"""
        query = db.query(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        return query.all()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        创建一个新的记录。

        Args:
            db: 数据库会话
            obj_in: 创建记录的数据对象或字典（字段使用模型属性名）

        Returns:
            ModelType: 创建的记录
        """
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        更新一个已存在的记录。

        Args:
            db: 数据库会话
            db_obj: 要更新的数据库对象
            obj_in: 更新数据对象，可以是UpdateSchemaType或字典

        Returns:
            ModelType: 更新后的记录
        """
        if db_obj is None:
            raise TypeError("db_obj must not be None")
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()

        for name, value in update_data.items():
            setattr(db_obj, name, value)

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, obj_id: Any) -> Optional[ModelType]:
        """
        删除一个记录。

        Returns:
            Optional[ModelType]: 被删除的记录，如果不存在则返回None
        """
        obj = self.get(db, obj_id)
        if obj:
            db.delete(obj)
            db.commit()
        return obj
