import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Request, Form
from fastapi.responses import RedirectResponse

# 导入配置
from config.providers import WechatSettings
# 导入依赖
from core.deps import get_wechat_client, get_wechat_settings, to_http_exception
# 导入模型
from model.wechat_models import AuthorizedTokenResponse, TokenResponse, UserInfo, WechatLang, WechatScope
# 导入服务
from service.wechat_oauth_service import WechatOAuthClient, WechatOAuthError, UpstreamRejectedError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth/wechat",
    tags=["WeChat Authentication (v1)"]
)

SESSION_STATE_KEY = "wechat_oauth_state"


@router.get("/login")
async def login_via_wechat(
        request: Request,
        settings: Annotated[WechatSettings, Depends(get_wechat_settings)],
        client: Annotated[WechatOAuthClient, Depends(get_wechat_client)],
        scope: Optional[WechatScope] = None,
):
    """重定向用户到微信授权页面 (需在微信内打开)"""
    try:
        result = client.build_authorization_url(
            settings.app_id, settings.redirect_uri,
            scope=(scope.value if scope else settings.scope),
        )
    except WechatOAuthError as e:
        raise to_http_exception(e) from e
    request.session[SESSION_STATE_KEY] = result.state
    return RedirectResponse(result.url)


@router.get("/callback", response_model=AuthorizedTokenResponse)
async def auth_wechat_callback(
        request: Request,
        code: str,
        state: str,
        settings: Annotated[WechatSettings, Depends(get_wechat_settings)],
        client: Annotated[WechatOAuthClient, Depends(get_wechat_client)],
):
    """处理微信授权回调，用 code 换取网页授权 access_token"""
    # 1. 验证 state
    expected_state = request.session.get(SESSION_STATE_KEY)
    if not expected_state or state != expected_state:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="无效的 state 参数")
    request.session.pop(SESSION_STATE_KEY, None)

    # 2. 用完整回调 url 换取 token，state 随结果原样返回
    try:
        token = await client.exchange_code_for_token(settings.app_id, str(request.url), settings.app_secret)
    except WechatOAuthError as e:
        raise to_http_exception(e) from e
    logger.info("微信授权成功: openid=%s, scope=%s", token.openid, token.scope)
    return token


@router.post("/token/refresh", response_model=TokenResponse)
async def refresh_wechat_token(
        refresh_token: Annotated[str, Form()],
        settings: Annotated[WechatSettings, Depends(get_wechat_settings)],
        client: Annotated[WechatOAuthClient, Depends(get_wechat_client)],
):
    """使用 refresh_token 刷新网页授权 access_token"""
    try:
        return await client.refresh_token(settings.app_id, refresh_token)
    except WechatOAuthError as e:
        raise to_http_exception(e) from e


@router.get("/userinfo", response_model=UserInfo)
async def read_wechat_userinfo(
        access_token: str,
        openid: str,
        client: Annotated[WechatOAuthClient, Depends(get_wechat_client)],
        lang: Optional[WechatLang] = None,
):
    """拉取用户详细信息 (仅 snsapi_userinfo 授权可用)"""
    try:
        return await client.fetch_user_info(access_token, openid, lang.value if lang else None)
    except WechatOAuthError as e:
        raise to_http_exception(e) from e


@router.get("/token/check")
async def check_wechat_token(
        access_token: str,
        openid: str,
        client: Annotated[WechatOAuthClient, Depends(get_wechat_client)],
):
    """检验网页授权 access_token 是否有效，失效时可调用刷新接口"""
    try:
        valid = await client.check_token_validity(access_token, openid)
    except UpstreamRejectedError:
        valid = False
    except WechatOAuthError as e:
        raise to_http_exception(e) from e
    return {"valid": valid}
