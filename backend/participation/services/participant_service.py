import logging
import threading
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from participation.core.exceptions import NotFoundError, ParticipationLimitError, ValidationFailedError
from participation.crud.crud_participant import participant as crud_participant
from participation.models.participant import Participant
from participation.schemas.participant import CreateParticipantDto, UpdateParticipantDto
from participation.services.participation_validation import (
    duplicate_name_message,
    validate_name_uniqueness,
    validate_participation_total,
)

logger = logging.getLogger(__name__)


class ParticipantService:
    """
    参与者业务服务

    负责把业务校验（姓名唯一、参与度总和不超过 100%）与写库放进同一个临界区：
    校验查询与写入共用一个数据库事务，并由进程级写锁串行化，
    因此同一进程内的并发请求不会同时通过"先查后写"的检查。
    跨进程的姓名冲突由数据库唯一索引兜底，转换为同样的校验错误。
    """

    def __init__(self):
        self._write_lock = threading.Lock()

    def list_participants(self, db: Session) -> List[Participant]:
        return crud_participant.get_all_newest_first(db)

    def get_participant(self, db: Session, participant_id: str) -> Participant:
        db_obj = crud_participant.get(db, participant_id)
        if db_obj is None:
            raise NotFoundError()
        return db_obj

    def create_participant(self, db: Session, dto: CreateParticipantDto) -> Participant:
        with self._write_lock:
            self._check_business_rules(db, dto.first_name, dto.last_name, dto.participation)
            try:
                created = crud_participant.create(db, obj_in=dto)
            except IntegrityError:
                db.rollback()
                raise ValidationFailedError(details=[duplicate_name_message(dto.first_name, dto.last_name)])
        logger.info(f"Created participant {created.id}")
        return created

    def update_participant(self, db: Session, participant_id: str, dto: UpdateParticipantDto) -> Participant:
        with self._write_lock:
            db_obj = crud_participant.get(db, participant_id)
            if db_obj is None:
                raise NotFoundError()
            self._check_business_rules(
                db, dto.first_name, dto.last_name, dto.participation, exclude_id=participant_id
            )
            try:
                updated = crud_participant.update(db, db_obj=db_obj, obj_in=dto)
            except IntegrityError:
                db.rollback()
                raise ValidationFailedError(details=[duplicate_name_message(dto.first_name, dto.last_name)])
        logger.info(f"Updated participant {participant_id}")
        return updated

    def delete_participant(self, db: Session, participant_id: str) -> None:
        with self._write_lock:
            removed = crud_participant.remove(db, obj_id=participant_id)
        if removed is None:
            raise NotFoundError()
        logger.info(f"Deleted participant {participant_id}")

    @staticmethod
    def _check_business_rules(db: Session, first_name: str, last_name: str, participation: float, exclude_id=None):
        uniqueness = validate_name_uniqueness(db, first_name, last_name, exclude_id)
        if not uniqueness.is_valid:
            raise ValidationFailedError(details=[uniqueness.error])

        total = validate_participation_total(db, participation, exclude_id)
        if not total.is_valid:
            raise ParticipationLimitError(details=[total.error])


participant_service = ParticipantService()
