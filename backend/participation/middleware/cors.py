"""
CORS 配置

按运行环境生成 fastapi CORSMiddleware 的参数：
    - development / test: 允许任意来源，不携带凭证，预检缓存 24 小时
    - production: 只允许 ALLOWED_ORIGINS 白名单，携带凭证，预检缓存 1 小时

预检请求（OPTIONS）直接返回空的 200 响应，其他请求在响应上追加 CORS 头。
"""
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import Response

from participation.core.config import Settings

RATE_LIMIT_HEADERS = ["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"]

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = [
    "Content-Type",
    "Authorization",
    "X-Requested-With",
    "Accept",
    "Origin",
    "X-API-Key",
    *RATE_LIMIT_HEADERS,
]


def cors_options_for(settings: Settings) -> Dict[str, Any]:
    """返回传给 CORSMiddleware 的关键字参数"""
    options: Dict[str, Any] = {
        "allow_methods": ALLOWED_METHODS,
        "allow_headers": ALLOWED_HEADERS,
        "expose_headers": RATE_LIMIT_HEADERS,
    }
    if settings.is_production:
        options.update(
            allow_origins=settings.allowed_origin_list,
            allow_credentials=True,
            max_age=3600,
        )
    else:
        options.update(
            allow_origins=["*"],
            allow_credentials=False,
            max_age=86400,
        )
    return options


class PreflightCORSMiddleware(CORSMiddleware):
    """
    预检请求一律返回空的 200

    CORS 头仍由 CORSMiddleware 计算；来源、方法或请求头不被允许时不带
    Access-Control-Allow-Origin，由浏览器拦截。
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        headers = {
            name: value
            for name, value in response.headers.items()
            if name not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


def setup_cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(PreflightCORSMiddleware, **cors_options_for(settings))
