import logging
from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from participation.config.dependency_injection import get_db, rate_limiters, read_json_body
from participation.core.dto_validation import validate_dto
from participation.core.exceptions import InternalServerError, ParticipationAPIError, ValidationFailedError
from participation.schemas.participant import (
    CreateParticipantDto,
    DeleteParticipantResponse,
    ParticipantResponseDto,
    UpdateParticipantDto,
)
from participation.services.participant_service import participant_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=List[ParticipantResponseDto],
    dependencies=[Depends(rate_limiters["lenient"])]
)
def list_participants(db: Session = Depends(get_db)):
    """获取所有参与者，最新创建的在前"""
    try:
        participants = participant_service.list_participants(db)
        return [ParticipantResponseDto.model_validate(p) for p in participants]
    except ParticipationAPIError:
        raise
    except Exception:
        logger.exception("Error fetching participants")
        raise InternalServerError("Failed to fetch participants")


@router.post(
    "",
    response_model=ParticipantResponseDto,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limiters["moderate"])]
)
def create_participant(body: Any = Depends(read_json_body), db: Session = Depends(get_db)):
    """
    创建参与者

    依次执行字段校验、姓名唯一性校验、参与度总和校验，全部通过后写库。

    Args:
        body: 请求体 {firstName, lastName, participation}
        db: 数据库会话

    Returns:
        ParticipantResponseDto: 创建的参与者
    """
    result = validate_dto(CreateParticipantDto, body)
    if not result.is_valid:
        raise ValidationFailedError(details=result.errors)

    try:
        created = participant_service.create_participant(db, result.data)
        return ParticipantResponseDto.model_validate(created)
    except ParticipationAPIError:
        raise
    except Exception:
        logger.exception("Error creating participant")
        raise InternalServerError("Failed to create participant")


@router.get(
    "/{participant_id}",
    response_model=ParticipantResponseDto,
    dependencies=[Depends(rate_limiters["lenient"])]
)
def get_participant(participant_id: str, db: Session = Depends(get_db)):
    try:
        found = participant_service.get_participant(db, participant_id)
        return ParticipantResponseDto.model_validate(found)
    except ParticipationAPIError:
        raise
    except Exception:
        logger.exception(f"Error fetching participant {participant_id}")
        raise InternalServerError("Failed to fetch participant")


@router.put(
    "/{participant_id}",
    response_model=ParticipantResponseDto,
    dependencies=[Depends(rate_limiters["moderate"])]
)
def update_participant(participant_id: str, body: Any = Depends(read_json_body), db: Session = Depends(get_db)):
    """
    更新参与者（整体替换姓名与参与度）

    参与度总和校验时排除该参与者的旧值，姓名唯一性校验时排除其自身。
    """
    result = validate_dto(UpdateParticipantDto, body)
    if not result.is_valid:
        raise ValidationFailedError(details=result.errors)

    try:
        updated = participant_service.update_participant(db, participant_id, result.data)
        return ParticipantResponseDto.model_validate(updated)
    except ParticipationAPIError:
        raise
    except Exception:
        logger.exception(f"Error updating participant {participant_id}")
        raise InternalServerError("Failed to update participant")


@router.delete(
    "/{participant_id}",
    response_model=DeleteParticipantResponse,
    dependencies=[Depends(rate_limiters["strict"])]
)
def delete_participant(participant_id: str, db: Session = Depends(get_db)):
    try:
        participant_service.delete_participant(db, participant_id)
        return DeleteParticipantResponse()
    except ParticipationAPIError:
        raise
    except Exception:
        logger.exception(f"Error deleting participant {participant_id}")
        raise InternalServerError("Failed to delete participant")
