import httpx
import pytest

from config.providers import WechatEndpoints, WechatSettings
from service.wechat_oauth_service import WechatOAuthClient

MOCK_ENDPOINTS = WechatEndpoints.from_base_urls("https://open.mock.test", "https://api.mock.test")

TOKEN_BODY = {
    "access_token": "ACCESS_TOKEN",
    "expires_in": 7200,
    "refresh_token": "REFRESH_TOKEN",
    "openid": "OPENID",
    "scope": "snsapi_userinfo",
}

USERINFO_BODY = {
    "openid": "OPENID",
    "nickname": "NICKNAME",
    "sex": 1,
    "province": "PROVINCE",
    "city": "CITY",
    "country": "COUNTRY",
    "headimgurl": "https://thirdwx.qlogo.cn/mmopen/g3MonUZtNHkdmzicIlibx6iaFqAc56vxLSUfpb6n5WKSYVY0ChQKkiaJSgQ1dZuTOgvLLrhJbERQQ4eMsv84eavHiaiceqxibJxCfHe/46",
    "privilege": ["PRIVILEGE1", "PRIVILEGE2"],
    "unionid": "o6_bmasdasdsad6_2sgVt7hMZOPfL",
}


def json_handler(body, status_code=200):
    """固定返回 JSON 的 mock handler"""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)
    return handler


def text_handler(text, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=text)
    return handler


def connect_error_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("boom", request=request)


@pytest.fixture
def sent_requests():
    """记录客户端实际发出的请求"""
    return []


@pytest.fixture
def make_client(sent_requests):
    """用 MockTransport 代替微信接口构造客户端"""
    def _make(handler):
        def recording_handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            return handler(request)
        return WechatOAuthClient(endpoints=MOCK_ENDPOINTS, transport=httpx.MockTransport(recording_handler))
    return _make


@pytest.fixture
def wechat_settings():
    return WechatSettings(
        app_id="wx_test_appid",
        app_secret="test_secret",
        redirect_uri="https://example.com/oauth/v1/auth/wechat/callback",
        scope="snsapi_base",
    )
