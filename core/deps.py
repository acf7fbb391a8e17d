from fastapi import HTTPException, status

# 导入配置
from config.providers import DEFAULT_ENDPOINTS, WechatSettings
# 导入服务
from service.wechat_oauth_service import (
    WechatOAuthClient, WechatOAuthError,
    InvalidInputError, NetworkError, DecodeError, UpstreamRejectedError,
)

# 失败原因 -> HTTP 状态码
_ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NetworkError: status.HTTP_503_SERVICE_UNAVAILABLE,
    DecodeError: status.HTTP_502_BAD_GATEWAY,
    UpstreamRejectedError: status.HTTP_401_UNAUTHORIZED,
}


def get_wechat_settings() -> WechatSettings:
    """依赖函数：公众号配置 (测试中可通过 dependency_overrides 替换)"""
    return WechatSettings()


def get_wechat_client() -> WechatOAuthClient:
    """依赖函数：微信网页授权客户端"""
    return WechatOAuthClient(endpoints=DEFAULT_ENDPOINTS)


def to_http_exception(exc: WechatOAuthError) -> HTTPException:
    """将客户端错误转换为 HTTPException"""
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = {"kind": exc.kind, "message": exc.message}
    if isinstance(exc, UpstreamRejectedError):
        detail.update(errcode=exc.errcode, errmsg=exc.errmsg)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)
