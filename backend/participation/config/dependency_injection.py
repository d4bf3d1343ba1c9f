import json
import logging
from typing import Any, Dict

from limits.storage import MemoryStorage, Storage, storage_from_string
from starlette.requests import Request

from participation.core.config import settings
from participation.core.exceptions import ValidationFailedError
from participation.db.database import get_db  # noqa: F401
from participation.middleware.auth import APIKeyAuth, AuthConfig
from participation.middleware.rate_limit import RATE_LIMIT_TIERS, RateLimiter, create_rate_limiter

logger = logging.getLogger(__name__)


def create_rate_limit_storage() -> Storage:
    """
    根据配置创建限流计数存储

    所有限流等级共用一个存储，各等级以自身名称作为计数命名空间。
    """
    if settings.RATE_LIMIT_BACKEND == "redis":
        return storage_from_string(settings.REDIS_URL)
    return MemoryStorage()


def create_rate_limiters() -> Dict[str, RateLimiter]:
    # 测试环境下关闭限流
    enabled = settings.ENVIRONMENT != "test"
    logger.info(f"Rate limiting {'enabled' if enabled else 'disabled'} (backend={settings.RATE_LIMIT_BACKEND})")
    storage = create_rate_limit_storage()
    return {
        tier: create_rate_limiter(
            tier,
            storage=storage,
            enabled=enabled,
            window_ms=settings.RATE_LIMIT_WINDOW_MS,
        )
        for tier in RATE_LIMIT_TIERS
    }


# 创建单例实例，路由通过 Depends 引用，测试中可用 dependency_overrides 替换
api_key_auth = APIKeyAuth(AuthConfig.from_settings(settings))
rate_limiters = create_rate_limiters()


async def read_json_body(request: Request) -> Any:
    """
    解析请求体 JSON

    请求体不是合法 JSON 时返回 400，而不是作为未分类错误返回 500。
    """
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailedError(details=["Request body must be valid JSON"])
