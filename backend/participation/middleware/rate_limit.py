"""
固定窗口限流

以 "客户端IP:请求路径" 为键计数，计数与窗口过期交给 limits 的
FixedWindowRateLimiter：窗口内每个请求加 1，窗口过期后重新开始；
计数超过上限时返回 429，并通过 Retry-After 告知剩余秒数。

计数存储可替换（limits.storage）：
    - MemoryStorage: 进程内存，不跨实例共享，进程重启后清零
    - RedisStorage: 多实例共享同一计数
"""
import logging
import math
import time
from typing import Dict, NamedTuple, Optional

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter
from starlette.requests import Request
from starlette.responses import Response

from participation.core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_MS = 60 * 1000


class RateLimitTier(NamedTuple):
    limit: int
    window_ms: int
    message: str


RATE_LIMIT_TIERS: Dict[str, RateLimitTier] = {
    "strict": RateLimitTier(5, DEFAULT_WINDOW_MS, "Too many requests. Please try again later."),
    "moderate": RateLimitTier(30, DEFAULT_WINDOW_MS, "Too many requests. Please slow down."),
    "lenient": RateLimitTier(100, DEFAULT_WINDOW_MS, "Rate limit exceeded. Please try again later."),
    "very_strict": RateLimitTier(3, DEFAULT_WINDOW_MS, "Too many sensitive requests. Please wait before trying again."),
}


class RateLimitStatus(NamedTuple):
    remaining: int
    # 窗口结束时间（毫秒时间戳）
    reset_time: int


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    cf_connecting_ip = request.headers.get("cf-connecting-ip")
    if cf_connecting_ip:
        return cf_connecting_ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimiter:
    """
    限流依赖，挂在路由的 dependencies 上使用。

    Args:
        limit: 每个窗口允许的请求数
        window_ms: 窗口长度（毫秒，按整秒计）
        message: 超限时返回的错误信息
        storage: limits 计数存储，默认进程内存
        scope: 计数命名空间，共用一个存储的不同限流器互不影响
        enabled: 为 False 时直接放行（测试环境）
    """

    def __init__(
        self,
        limit: int,
        window_ms: int = DEFAULT_WINDOW_MS,
        message: str = "Too many requests",
        storage: Optional[Storage] = None,
        scope: str = "default",
        enabled: bool = True
    ):
        self.limit = limit
        self.window_ms = window_ms
        self.message = message
        self.scope = scope
        self.enabled = enabled
        self.item = RateLimitItemPerSecond(limit, max(1, window_ms // 1000))
        self.strategy = FixedWindowRateLimiter(storage if storage is not None else MemoryStorage())

    def check(self, key: str) -> RateLimitStatus:
        allowed = self.strategy.hit(self.item, self.scope, key)
        stats = self.strategy.get_window_stats(self.item, self.scope, key)
        reset_time = int(stats.reset_time * 1000)
        if not allowed:
            retry_after = max(1, math.ceil(stats.reset_time - time.time()))
            logger.warning(f"Rate limit exceeded for {self.scope}:{key} (limit {self.limit})")
            raise RateLimitExceededError(
                self.message,
                retry_after=retry_after,
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(self.limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(reset_time),
                },
            )
        return RateLimitStatus(remaining=stats.remaining, reset_time=reset_time)

    def __call__(self, request: Request, response: Response) -> None:
        if not self.enabled:
            return
        current = self.check(f"{get_client_ip(request)}:{request.url.path}")
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(current.remaining),
            "X-RateLimit-Reset": str(current.reset_time),
        }
        response.headers.update(headers)
        # 接口随后抛出的错误响应也带上这些头，见 participation_api_error_handler
        request.state.rate_limit_headers = headers


def create_rate_limiter(
    tier: str,
    *,
    storage: Optional[Storage] = None,
    enabled: bool = True,
    window_ms: Optional[int] = None
) -> RateLimiter:
    """按敏感等级（strict/moderate/lenient/very_strict）创建限流器"""
    config = RATE_LIMIT_TIERS[tier]
    return RateLimiter(
        limit=config.limit,
        window_ms=window_ms or config.window_ms,
        message=config.message,
        storage=storage,
        scope=tier,
        enabled=enabled,
    )
