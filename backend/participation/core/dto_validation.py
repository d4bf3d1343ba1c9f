"""
声明式请求体校验

每个 DTO 在 ``field_rules`` 中按字段（对外的 camelCase 名称）声明一组规则，
``validate_dto`` 会执行所有字段的所有规则并收集全部错误信息，
而不是在第一个错误处停止，方便客户端一次性展示所有问题。
全部规则通过后再由 pydantic 构造 DTO 实例。
"""
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Generic, List, NamedTuple, Optional, Type, TypeVar

from pydantic import BaseModel

INVALID_DATA_FORMAT = "Invalid data format"

# 字段缺失与显式 null 同样处理
MISSING = None


class Rule(NamedTuple):
    check: Callable[[Any], bool]
    message: str


def _is_number(value: Any) -> bool:
    # bool 是 int 的子类，需要单独排除；NaN/Infinity 不算合法数字
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_string(message: str) -> Rule:
    return Rule(lambda value: isinstance(value, str), message)


def is_not_empty(message: str) -> Rule:
    return Rule(lambda value: value is not MISSING and value != "", message)


def min_length(length: int, message: str) -> Rule:
    return Rule(lambda value: isinstance(value, str) and len(value) >= length, message)


def max_length(length: int, message: str) -> Rule:
    return Rule(lambda value: isinstance(value, str) and len(value) <= length, message)


def matches(pattern: str, message: str) -> Rule:
    compiled = re.compile(pattern)
    return Rule(lambda value: isinstance(value, str) and compiled.fullmatch(value) is not None, message)


def is_number(message: str) -> Rule:
    return Rule(_is_number, message)


def min_value(minimum: float, message: str) -> Rule:
    return Rule(lambda value: _is_number(value) and value >= minimum, message)


def max_value(maximum: float, message: str) -> Rule:
    return Rule(lambda value: _is_number(value) and value <= maximum, message)


class ValidatedDto(BaseModel):
    """带有声明式字段规则的 DTO 基类"""
    field_rules: ClassVar[Dict[str, List[Rule]]] = {}

    @classmethod
    def collect_errors(cls, data: Dict[str, Any]) -> List[str]:
        errors: List[str] = []
        for name, rules in cls.field_rules.items():
            value = data.get(name, MISSING)
            errors.extend(rule.message for rule in rules if not rule.check(value))
        return errors


DtoType = TypeVar("DtoType", bound=ValidatedDto)


@dataclass
class ValidationResult(Generic[DtoType]):
    """校验结果

    Attributes:
        is_valid: 是否通过校验
        errors: 所有违反的约束信息
        data: 通过校验后构造的 DTO 实例
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    data: Optional[DtoType] = None


def validate_dto(dto_class: Type[DtoType], data: Any) -> ValidationResult[DtoType]:
    if not isinstance(data, dict):
        return ValidationResult(is_valid=False, errors=[INVALID_DATA_FORMAT])

    errors = dto_class.collect_errors(data)
    if errors:
        return ValidationResult(is_valid=False, errors=errors)

    # 规则全部通过后字段类型已确定，pydantic 只负责构造实例
    return ValidationResult(is_valid=True, errors=[], data=dto_class.model_validate(data))
