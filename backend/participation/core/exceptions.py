"""
接口错误分类与统一异常处理

所有业务可预期的错误都抛出 ParticipationAPIError 的子类，
由 participation_api_error_handler 统一转换为 JSON 响应：

    {"error": "...", "details": [...], "message": "..."}

其中 details 与 message 仅在有值时返回。
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ParticipationAPIError(Exception):
    """接口错误基类"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(
        self,
        error: Optional[str] = None,
        *,
        details: Optional[List[str]] = None,
        message: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        self.error = error or self.error
        self.details = details
        self.message = message
        self.headers = headers
        self.extra = extra or {}
        super().__init__(self.error)

    def to_dict(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            content["details"] = self.details
        if self.message is not None:
            content["message"] = self.message
        content.update(self.extra)
        return content


class ValidationFailedError(ParticipationAPIError):
    """请求体字段校验或姓名唯一性校验失败"""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"


class ParticipationLimitError(ParticipationAPIError):
    """参与度总和超过 100%"""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Participation validation failed"


class AuthenticationError(ParticipationAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Authentication required"


class ForbiddenError(ParticipationAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"


class NotFoundError(ParticipationAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Participant not found"


class RateLimitExceededError(ParticipationAPIError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "Too many requests"

    def __init__(self, error: Optional[str] = None, *, retry_after: int, headers: Optional[Dict[str, str]] = None):
        super().__init__(error, headers=headers, extra={"retryAfter": retry_after})
        self.retry_after = retry_after


class InternalServerError(ParticipationAPIError):
    """未分类错误，只返回通用信息，不泄露内部细节"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def participation_api_error_handler(request: Request, exc: ParticipationAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.error}")
    # 限流依赖已放行时，错误响应同样带上 X-RateLimit-* 头
    headers = {**getattr(request.state, "rate_limit_headers", {}), **(exc.headers or {})}
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers or None,
    )
