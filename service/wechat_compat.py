"""
与早期模块级接口保持一致的简化调用方式。

所有失败 (参数错误、网络异常、非 JSON 响应、微信返回错误) 一律返回 False，
需要区分失败原因时请直接使用 WechatOAuthClient。
"""
from typing import Optional, Union

from model.wechat_models import AuthorizationResult, AuthorizedTokenResponse, TokenResponse, UserInfo
from service.wechat_oauth_service import WechatOAuthClient, WechatOAuthError

default_client = WechatOAuthClient()


def get_auth_url(appid: str, redirect_uri: str, state: Optional[str] = None,
                 scope: Optional[str] = None,
                 client: WechatOAuthClient = default_client) -> Union[AuthorizationResult, bool]:
    """
    获取用户授权页面 url，失败返回 False。

    scope 只接受 snsapi_base / snsapi_userinfo，其他作用域 (如开放平台扫码登录的
    snsapi_login) 不适用于公众号授权页，同样返回 False。
    """
    try:
        return client.build_authorization_url(appid, redirect_uri, state, scope or "snsapi_base")
    except WechatOAuthError:
        return False


async def get_token(appid: str, r_url: str, secret: str,
                    client: WechatOAuthClient = default_client) -> Union[AuthorizedTokenResponse, bool]:
    try:
        return await client.exchange_code_for_token(appid, r_url, secret)
    except WechatOAuthError:
        return False


async def refresh_token(appid: str, refresh_token: str,
                        client: WechatOAuthClient = default_client) -> Union[TokenResponse, bool]:
    try:
        return await client.refresh_token(appid, refresh_token)
    except WechatOAuthError:
        return False


async def get_userinfo(access_token: str, openid: str, lang: Optional[str] = None,
                       client: WechatOAuthClient = default_client) -> Union[UserInfo, bool]:
    try:
        return await client.fetch_user_info(access_token, openid, lang)
    except WechatOAuthError:
        return False


async def check_access_token(access_token: str, openid: str,
                             client: WechatOAuthClient = default_client) -> bool:
    try:
        return await client.check_token_validity(access_token, openid)
    except WechatOAuthError:
        return False
