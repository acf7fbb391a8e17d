import json
import logging
import re
import uuid
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

# 导入配置
from config.providers import DEFAULT_ENDPOINTS, WechatEndpoints
# 导入模型
from model.wechat_models import (
    AuthorizationResult, AuthorizedTokenResponse, TokenResponse, UserInfo,
    WechatLang, WechatScope,
)

logger = logging.getLogger(__name__)

_ABSOLUTE_URL_RE = re.compile(r"^(http|https)://")


# --- 错误类型 ---
class WechatOAuthError(Exception):
    """微信网页授权调用失败的基类，kind 用于区分失败原因"""
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(WechatOAuthError):
    """参数缺失或不合法，未发出任何请求"""
    kind = "invalid_input"


class NetworkError(WechatOAuthError):
    """请求本身失败 (DNS、连接、超时、非 2xx 状态码)"""
    kind = "network"


class DecodeError(WechatOAuthError):
    """响应不是合法的 JSON 对象"""
    kind = "decode"


class UpstreamRejectedError(WechatOAuthError):
    """微信返回了错误信息 (errcode/errmsg)，或缺少表示成功的字段"""
    kind = "upstream_rejected"

    def __init__(self, message: str, errcode: Optional[int] = None, errmsg: Optional[str] = None):
        super().__init__(message)
        self.errcode = errcode
        self.errmsg = errmsg


def check_url(url: Optional[str]) -> bool:
    """检查是否为 http/https 开头的绝对地址"""
    return bool(url) and _ABSOLUTE_URL_RE.match(url) is not None


def _require(**params: Optional[str]) -> None:
    for name, value in params.items():
        if not value:
            raise InvalidInputError(f"缺少参数: {name}")


def _describe_http_error(e: httpx.HTTPError) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        return f"HTTP {e.response.status_code}"
    return type(e).__name__


def _rejected(data: Dict[str, Any], what: str) -> UpstreamRejectedError:
    errcode = data.get("errcode")
    errmsg = data.get("errmsg")
    logger.warning("微信%s失败: errcode=%s, errmsg=%s", what, errcode, errmsg)
    return UpstreamRejectedError(f"微信{what}失败: {errmsg or '响应缺少必要字段'}", errcode=errcode, errmsg=errmsg)


class WechatOAuthClient:
    """
    微信公众号网页授权客户端。

    无状态：每次调用只发出一个 GET 请求，各方法可并发调用。
    endpoints 可替换为指向 mock 服务的地址，transport 用于测试时注入 httpx.MockTransport。
    """

    def __init__(self, endpoints: WechatEndpoints = DEFAULT_ENDPOINTS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.endpoints = endpoints
        self.transport = transport

    def build_authorization_url(self, appid: str, redirect_uri: str, state: Optional[str] = None,
                                scope: str = WechatScope.BASE.value) -> AuthorizationResult:
        """
        拼装用户授权页面 url。

        注意：如果用户已关注公众号，且从公众号的会话或自定义菜单中进入授权页，
        即使是 snsapi_userinfo，也是静默授权的。
        state 省略时生成 uuid1。
        """
        if not check_url(redirect_uri):
            raise InvalidInputError(f"redirect_uri 必须是 http/https 绝对地址: {redirect_uri!r}")
        _require(appid=appid)
        try:
            scope = WechatScope(scope).value
        except ValueError:
            raise InvalidInputError(f"不支持的授权作用域: {scope!r}")
        state = state or str(uuid.uuid1())

        params = {
            "appid": appid,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": scope,
            "state": state,
        }
        # 微信要求以 #wechat_redirect 结尾
        url = f"{self.endpoints.authorize_url}?{urlencode(params)}#wechat_redirect"
        return AuthorizationResult(url=url, state=state)

    async def exchange_code_for_token(self, appid: str, code_or_callback_url: str,
                                      secret: str) -> AuthorizedTokenResponse:
        """
        用 code 换取网页授权 access_token，此步骤可获得用户 openid。

        code_or_callback_url 可以是授权回调页面的完整 url (自动提取 code 与 state)，
        也可以是从回调参数中取出的 code。
        """
        _require(appid=appid, code_or_callback_url=code_or_callback_url, secret=secret)
        state = None
        if check_url(code_or_callback_url):
            query = httpx.URL(code_or_callback_url).params
            code = query.get("code")
            state = query.get("state")
            if not code:
                raise InvalidInputError("回调 url 中缺少 code 参数")
        else:
            code = code_or_callback_url

        data = await self._get_json(self.endpoints.access_token_url, {
            "appid": appid,
            "secret": secret,
            "code": code,
            "grant_type": "authorization_code",
        })
        if not data.get("access_token"):
            raise _rejected(data, "获取 access_token")
        return self._parse(AuthorizedTokenResponse, {**data, "state": state})

    async def refresh_token(self, appid: str, refresh_token: str) -> TokenResponse:
        """
        刷新 access_token。

        access_token 有效期 7200 秒，refresh_token 有效期 30 天；
        需要长期静默获取用户信息时，由调用方定期刷新。
        """
        _require(appid=appid, refresh_token=refresh_token)
        data = await self._get_json(self.endpoints.refresh_token_url, {
            "appid": appid,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        })
        if not data.get("access_token"):
            raise _rejected(data, "刷新 access_token")
        return self._parse(TokenResponse, data)

    async def fetch_user_info(self, access_token: str, openid: str, lang: Optional[str] = None) -> UserInfo:
        """拉取用户详细信息，lang 省略时微信默认返回简体中文"""
        _require(access_token=access_token, openid=openid)
        params = {"access_token": access_token, "openid": openid}
        if lang:
            try:
                params["lang"] = WechatLang(lang).value
            except ValueError:
                raise InvalidInputError(f"不支持的语言版本: {lang!r}")

        data = await self._get_json(self.endpoints.userinfo_url, params)
        if not data.get("openid"):
            raise _rejected(data, "拉取用户信息")
        return self._parse(UserInfo, data)

    async def check_token_validity(self, access_token: str, openid: str) -> bool:
        """检验授权凭证 (access_token) 是否有效，仅 errcode 为 0 时视为有效"""
        _require(access_token=access_token, openid=openid)
        data = await self._get_json(self.endpoints.auth_url, {
            "access_token": access_token,
            "openid": openid,
        })
        errcode = data.get("errcode")
        if isinstance(errcode, bool) or errcode != 0:
            raise _rejected(data, "校验 access_token")
        return True

    async def _get_json(self, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        logger.debug("请求微信接口: %s", url)
        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.get(url, params=params)
                response.raise_for_status()
            except httpx.HTTPError as e:
                # 异常文本含完整查询串 (secret/code/token)，只记录接口地址与错误类型
                reason = _describe_http_error(e)
                logger.warning("请求微信接口异常: %s, %s", url, reason)
                raise NetworkError(f"请求微信接口失败: {url}, {reason}") from e
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("微信接口返回非 JSON 内容: %s", url)
            raise DecodeError("微信接口返回的内容不是合法 JSON") from e
        if not isinstance(data, dict):
            raise DecodeError("微信接口返回的 JSON 不是对象")
        return data

    @staticmethod
    def _parse(model, data: Dict[str, Any]):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            logger.warning("微信接口响应字段无法解析: %s %s", model.__name__, fields)
            raise DecodeError(f"微信接口响应字段无法解析: {model.__name__}") from e
