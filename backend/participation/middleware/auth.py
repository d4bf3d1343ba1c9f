import logging
import secrets
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlsplit

from starlette.requests import Request

from participation.core.config import Settings
from participation.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


@dataclass
class AuthConfig:
    api_key_header: str = API_KEY_HEADER
    allowed_keys: List[str] = field(default_factory=list)
    require_auth: bool = False
    # 来自该前端的请求免校验；Origin/Referer 可被伪造，默认关闭
    trusted_origin: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(
            allowed_keys=settings.api_key_list,
            require_auth=settings.is_production,
            trusted_origin=settings.TRUSTED_FRONTEND_ORIGIN,
        )


def _origin_of(url: Optional[str]) -> Optional[str]:
    """取 URL 的 scheme://host[:port] 部分，无法解析时返回 None"""
    if not url:
        return None
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def is_from_trusted_origin(request: Request, trusted_origin: Optional[str]) -> bool:
    """Origin 或 Referer 的来源与 trusted_origin 完全一致时返回 True"""
    expected = _origin_of(trusted_origin)
    if expected is None:
        return False
    return expected in (
        _origin_of(request.headers.get("origin")),
        _origin_of(request.headers.get("referer")),
    )


class APIKeyAuth:
    """
    API Key 鉴权依赖

    共享密钥模型：请求头中的 key 必须在配置的 key 列表中，
    只做放行/拒绝判断，没有按 key 区分的身份或权限。
    """

    def __init__(self, config: AuthConfig):
        self.config = config

    def __call__(self, request: Request) -> None:
        if not self.config.require_auth:
            return
        # CORS 预检请求不校验
        if request.method == "OPTIONS":
            return
        if is_from_trusted_origin(request, self.config.trusted_origin):
            return

        api_key = request.headers.get(self.config.api_key_header)
        if not api_key:
            logger.warning(f"Missing API key on {request.method} {request.url.path}")
            raise AuthenticationError(
                "Authentication required",
                message=f"Missing {self.config.api_key_header} header",
            )

        if api_key not in self.config.allowed_keys:
            logger.warning(f"Invalid API key on {request.method} {request.url.path}")
            raise AuthenticationError("Authentication failed", message="Invalid API key")


def generate_api_key() -> str:
    """生成一个 64 位十六进制的随机 API Key"""
    return secrets.token_hex(32)


def generate_api_keys(count: int = 3) -> List[str]:
    return [generate_api_key() for _ in range(count)]
