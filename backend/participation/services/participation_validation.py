import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.orm import Session

from participation.crud.crud_participant import participant as crud_participant

logger = logging.getLogger(__name__)

MAX_TOTAL_PARTICIPATION = 100
# 比较前对总和取整，避免 33.3 + 33.3 + 33.4 之类的浮点误差
TOTAL_PRECISION = 6


@dataclass
class ParticipationValidationResult:
    is_valid: bool
    current_total: float
    new_total: float
    error: Optional[str] = None


@dataclass
class UniquenessValidationResult:
    is_valid: bool
    error: Optional[str] = None

    """整数值不带小数点输出（101 而不是 101.0），其余保留至多 6 位小数并去掉末尾的 0"""
def format_percentage(value: Union[int, float]) -> str:
    """保留至多 6 位小数并去掉末尾的 0（101 而不是 101.0，54.87655 而不是 54.8766）"""
    value = round(float(value), TOTAL_PRECISION)
    if value.is_integer():
        return str(int(value))
    return f"{value:.{TOTAL_PRECISION}f}".rstrip("0").rstrip(".")


def validate_participation_total(
    db: Session,
    new_participation: float,
    exclude_participant_id: Optional[str] = None
) -> ParticipationValidationResult:
    """
    校验加入/修改一个参与者后参与度总和不超过 100%。

    Args:
        db: 数据库会话
        new_participation: 新的参与度
        exclude_participant_id: 正在编辑的参与者ID，其旧值不计入当前总和

    Returns:
        ParticipationValidationResult: 当前总和、新总和以及错误信息
    """
    current_total = round(
        crud_participant.get_participation_total(db, exclude_id=exclude_participant_id),
        TOTAL_PRECISION
    )
    new_total = round(current_total + new_participation, TOTAL_PRECISION)

    if new_total > MAX_TOTAL_PARTICIPATION:
        headroom = MAX_TOTAL_PARTICIPATION - current_total
        logger.info(f"Participation total {new_total} rejected (current {current_total})")
        return ParticipationValidationResult(
            is_valid=False,
            current_total=current_total,
            new_total=new_total,
            error=(
                f"Total participation would be {format_percentage(new_total)}%, which exceeds 100%. "
                f"Current total is {format_percentage(current_total)}%, so the maximum allowed "
                f"participation is {format_percentage(headroom)}%."
            ),
        )

    return ParticipationValidationResult(
        is_valid=True,
        current_total=current_total,
        new_total=new_total,
    )


def validate_name_uniqueness(
    db: Session,
    first_name: str,
    last_name: str,
    exclude_participant_id: Optional[str] = None
) -> UniquenessValidationResult:
    """校验姓名组合唯一（不区分大小写），编辑时排除参与者自身"""
    existing = crud_participant.get_by_name(
        db,
        first_name=first_name,
        last_name=last_name,
        exclude_id=exclude_participant_id,
    )
    if existing is not None:
        return UniquenessValidationResult(is_valid=False, error=duplicate_name_message(first_name, last_name))
    return UniquenessValidationResult(is_valid=True)


def duplicate_name_message(first_name: str, last_name: str) -> str:
    return f'A participant with the name "{first_name} {last_name}" already exists.'
