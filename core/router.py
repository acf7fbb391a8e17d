from fastapi import APIRouter

from core.v1 import wechat_auth

router = APIRouter()

api_v1_router = APIRouter(prefix="/v1")
api_v1_router.include_router(wechat_auth.router)

router.include_router(api_v1_router, prefix="/oauth")
