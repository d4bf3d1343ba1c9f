from fastapi import APIRouter, Depends, Request

from participation.config.dependency_injection import rate_limiters
from participation.core.config import settings
from participation.core.exceptions import ForbiddenError, InternalServerError
from participation.middleware.auth import is_from_trusted_origin
from participation.schemas.participant import AuthKeyResponse

router = APIRouter()


@router.get("", response_model=AuthKeyResponse, dependencies=[Depends(rate_limiters["very_strict"])])
def get_auth_key(request: Request):
    """
    向已部署的前端返回第一个 API Key

    仅在生产环境、且请求来自 TRUSTED_FRONTEND_ORIGIN 时可用。
    """
    if not settings.is_production:
        raise ForbiddenError("Not available in development")

    if not is_from_trusted_origin(request, settings.TRUSTED_FRONTEND_ORIGIN):
        raise ForbiddenError("Unauthorized origin")

    api_keys = settings.api_key_list
    if not api_keys:
        raise InternalServerError("API keys not configured")

    return AuthKeyResponse(api_key=api_keys[0])
