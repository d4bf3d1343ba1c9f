from typing import List, Optional
from sqlalchemy import desc, func
from sqlalchemy.orm import Session
from participation.crud.base import CRUDBase
from participation.models.participant import Participant
from participation.schemas.participant import CreateParticipantDto, UpdateParticipantDto


class CRUDParticipant(CRUDBase[Participant, CreateParticipantDto, UpdateParticipantDto]):
    def get_all_newest_first(self, db: Session) -> List[Participant]:
        """获取全部参与者，按创建时间倒序排列（最新的在前）"""
        return self.get_all(db, order_by=desc(self.model.created_at))

    def get_by_name(
        self,
        db: Session,
        *,
        first_name: str,
        last_name: str,
        exclude_id: Optional[str] = None
    ) -> Optional[Participant]:
        """
        按姓名查找参与者（不区分大小写）。

        Args:
            db: 数据库会话
            first_name: 名
            last_name: 姓
            exclude_id: 需要排除的参与者ID（编辑时排除自身）

        Returns:
            Optional[Participant]: 第一个匹配的参与者，不存在则返回None
        """
        query = db.query(self.model).filter(
            func.lower(self.model.first_name) == first_name.lower(),
            func.lower(self.model.last_name) == last_name.lower(),
        )
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return query.first()

    def get_participation_total(self, db: Session, *, exclude_id: Optional[str] = None) -> float:
        """计算所有参与者的参与度之和，可排除一个参与者"""
        query = db.query(func.coalesce(func.sum(self.model.participation), 0.0))
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return float(query.scalar())


# 实例化并暴露给服务层使用
participant = CRUDParticipant(Participant)
