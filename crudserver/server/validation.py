"""
请求校验

在进入服务层之前拒绝不合法的输入。所有失败项合并为一条信息，
以 InvalidInput 抛出，由接口层转换为 400。
"""
import re
from typing import Any

from pydantic import ValidationError

from .errors import InvalidInput
from .models import UserCreate, UserUpdate

# 8-4-4-4-12 十六进制 UUID 文本
USER_ID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)

# 自定义规则的错误信息本身已包含字段名
_CUSTOM_ERROR_TYPES = {"required", "email_format"}


def format_errors(exc: ValidationError) -> str:
    """把 pydantic 的全部错误合并为一条可读信息"""
    messages = []
    for error in exc.errors():
        if error["type"] in _CUSTOM_ERROR_TYPES or not error["loc"]:
            messages.append(error["msg"])
        else:
            field = ".".join(str(part) for part in error["loc"])
            messages.append(f"{field}: {error['msg']}")
    return ", ".join(messages)


def _require_object(payload: Any):
    if not isinstance(payload, dict):
        raise InvalidInput("Request body must be a JSON object")


def validate_create(payload: Any) -> UserCreate:
    """校验创建请求"""
    _require_object(payload)
    try:
        return UserCreate.model_validate(payload)
    except ValidationError as e:
        raise InvalidInput(format_errors(e))


def validate_update(payload: Any) -> UserUpdate:
    """校验部分更新请求，只校验提供了的字段"""
    _require_object(payload)
    try:
        return UserUpdate.model_validate(payload)
    except ValidationError as e:
        raise InvalidInput(format_errors(e))


def validate_user_id(user_id: Any) -> str:
    """校验路径中的用户ID格式"""
    if not isinstance(user_id, str) or not USER_ID_PATTERN.fullmatch(user_id):
        raise InvalidInput("Invalid user ID format")
    return user_id


__all__ = [
    "USER_ID_PATTERN",
    "format_errors",
    "validate_create",
    "validate_update",
    "validate_user_id",
]
