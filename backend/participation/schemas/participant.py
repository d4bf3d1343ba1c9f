# backend/participation/schemas/participant.py
from typing import ClassVar, Dict, List
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from participation.core.dto_validation import (
    Rule,
    ValidatedDto,
    is_number,
    is_not_empty,
    is_string,
    matches,
    max_length,
    max_value,
    min_length,
    min_value,
)

NAME_MIN_LENGTH = 2
CREATE_NAME_MAX_LENGTH = 50
# 更新接口沿用历史上更严格的长度上限
UPDATE_NAME_MAX_LENGTH = 32
NAME_PATTERN = r"[a-zA-Z\s]+"


def _name_rules(label: str, max_len: int) -> List[Rule]:
    return [
        is_string(f"{label} must be a string"),
        is_not_empty(f"{label} is required"),
        min_length(NAME_MIN_LENGTH, f"{label} must be at least {NAME_MIN_LENGTH} characters long"),
        max_length(max_len, f"{label} must be less than {max_len} characters"),
        matches(NAME_PATTERN, f"{label} can only contain letters and spaces"),
    ]


PARTICIPATION_RULES = [
    is_number("Participation must be a number"),
    min_value(0, "Participation must be at least 0%"),
    max_value(100, "Participation cannot exceed 100%"),
]


class ParticipantFields(ValidatedDto):
    """参与者请求体公共字段，对外使用 camelCase 字段名

    字段约束只在 field_rules 中声明一次，由 validate_dto 统一执行。
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str = Field(..., description="名，只允许字母和空格")
    last_name: str = Field(..., description="姓，只允许字母和空格")
    participation: float = Field(..., description="参与度百分比，0-100")


class CreateParticipantDto(ParticipantFields):
    """创建参与者请求模型"""
    field_rules: ClassVar[Dict[str, List[Rule]]] = {
        "firstName": _name_rules("First name", CREATE_NAME_MAX_LENGTH),
        "lastName": _name_rules("Last name", CREATE_NAME_MAX_LENGTH),
        "participation": PARTICIPATION_RULES,
    }


class UpdateParticipantDto(ParticipantFields):
    """更新参与者请求模型（整体替换姓名与参与度）"""
    field_rules: ClassVar[Dict[str, List[Rule]]] = {
        "firstName": _name_rules("First name", UPDATE_NAME_MAX_LENGTH),
        "lastName": _name_rules("Last name", UPDATE_NAME_MAX_LENGTH),
        "participation": PARTICIPATION_RULES,
    }


class ParticipantResponseDto(BaseModel):
    """参与者响应模型

    将数据库字段转换为前端约定的字段名：id, firstName, lastName, participation。
    """
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    first_name: str
    last_name: str
    participation: float


class DeleteParticipantResponse(BaseModel):
    """删除参与者响应模型"""
    message: str = "Participant deleted successfully"


class AuthKeyResponse(BaseModel):
    """前端获取 API Key 的响应模型"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    api_key: str
