import os

from pydantic import BaseModel, ConfigDict

# --- 日志配置 ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- 微信公众号网页授权配置 ---
# !! 重要：请将公众号的 AppID 和 AppSecret 设置为环境变量
# !! 或直接替换占位符。切勿将 AppSecret 硬编码提交！
WECHAT_APP_ID = os.getenv("WECHAT_APP_ID", "")
WECHAT_APP_SECRET = os.getenv("WECHAT_APP_SECRET", "")
WECHAT_REDIRECT_URI = os.getenv("WECHAT_REDIRECT_URI",
                                "http://localhost:5550/oauth/v1/auth/wechat/callback")  # 需与公众号后台配置的授权回调域名一致
WECHAT_SCOPE = os.getenv("WECHAT_SCOPE", "snsapi_base")  # snsapi_base 静默授权 / snsapi_userinfo 显式授权

# 接口域名，测试时可指向 mock 服务
WECHAT_OPEN_BASE_URL = os.getenv("WECHAT_OPEN_BASE_URL", "https://open.weixin.qq.com")
WECHAT_API_BASE_URL = os.getenv("WECHAT_API_BASE_URL", "https://api.weixin.qq.com")

# --- Session 配置 ---
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "global_session_secret_key")


class WechatEndpoints(BaseModel):
    """微信网页授权相关的固定接口地址 (不可变)"""
    model_config = ConfigDict(frozen=True)

    authorize_url: str
    access_token_url: str
    refresh_token_url: str
    userinfo_url: str
    auth_url: str  # 检验授权凭证是否有效

    @classmethod
    def from_base_urls(cls, open_base_url: str, api_base_url: str) -> "WechatEndpoints":
        open_base_url = open_base_url.rstrip("/")
        api_base_url = api_base_url.rstrip("/")
        return cls(
            authorize_url=f"{open_base_url}/connect/oauth2/authorize",
            access_token_url=f"{api_base_url}/sns/oauth2/access_token",
            refresh_token_url=f"{api_base_url}/sns/oauth2/refresh_token",
            userinfo_url=f"{api_base_url}/sns/userinfo",
            auth_url=f"{api_base_url}/sns/auth",
        )


# 启动时解析一次
DEFAULT_ENDPOINTS = WechatEndpoints.from_base_urls(WECHAT_OPEN_BASE_URL, WECHAT_API_BASE_URL)


class WechatSettings(BaseModel):
    """Web 层使用的公众号配置"""
    model_config = ConfigDict(frozen=True)

    app_id: str = WECHAT_APP_ID
    app_secret: str = WECHAT_APP_SECRET
    redirect_uri: str = WECHAT_REDIRECT_URI
    scope: str = WECHAT_SCOPE
