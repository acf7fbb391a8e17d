from enum import Enum

from pydantic import BaseModel, ConfigDict


class WechatScope(str, Enum):
    """用户授权作用域"""
    BASE = "snsapi_base"  # 静默授权，不弹授权页面，仅获得 openid
    USERINFO = "snsapi_userinfo"  # 显式授权，弹出授权页面，可获得用户更多信息


class WechatLang(str, Enum):
    """拉取用户信息时返回的语言版本"""
    ZH_CN = "zh_CN"
    ZH_TW = "zh_TW"
    EN = "en"


# --- 授权链接 ---
class AuthorizationResult(BaseModel):
    """拼装完成的授权链接，用户在微信中打开后进入授权流程"""
    url: str
    state: str  # 本次请求的访问标识，用于区分不同用户


# --- 微信 API 响应相关 ---
class TokenResponse(BaseModel):
    """网页授权 access_token (注意：与基础支持的 access_token 不同)"""
    access_token: str
    expires_in: int | None = None  # 单位秒，通常为 7200
    refresh_token: str | None = None  # 有效期 30 天
    openid: str | None = None
    scope: str | None = None  # 用户授权的作用域，使用逗号分隔
    unionid: str | None = None  # 仅在公众号绑定开放平台帐号后返回
    is_snapshotuser: int | None = None  # 1 表示快照页模式虚拟账号


class AuthorizedTokenResponse(TokenResponse):
    """用 code 换取的 token，附带授权回调中的 state"""
    state: str | None = None


class UserInfo(BaseModel):
    """
    用户详细信息 (仅 snsapi_userinfo 作用域可用)。

    微信返回的字段全部保留 (含未声明字段)，已声明字段按类型做宽松转换：
    sex 为 "1" 时转换为 1；privilege 为 null 时保持 None。
    无法转换的值 (如 privilege 为字符串) 视为响应无法解析。
    """
    model_config = ConfigDict(extra="allow")  # 保留微信返回的其他字段

    openid: str
    nickname: str | None = None
    sex: int = 0  # 1 男性，2 女性，0 未知
    province: str | None = None
    city: str | None = None
    country: str | None = None
    headimgurl: str | None = None  # 最后一个数值代表正方形头像大小，没有头像时为空
    privilege: list[str] | None = []
    unionid: str | None = None
