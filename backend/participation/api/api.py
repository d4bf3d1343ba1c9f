from fastapi import APIRouter, Depends
from participation.api.endpoints import auth_key, participants
from participation.config.dependency_injection import api_key_auth

api_router = APIRouter()
api_router.include_router(
    participants.router,
    prefix="/participants",
    tags=["participants"],
    dependencies=[Depends(api_key_auth)]
)
api_router.include_router(auth_key.router, prefix="/auth-key", tags=["auth"])
