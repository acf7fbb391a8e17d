import logging

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from config.providers import LOG_LEVEL, SESSION_SECRET_KEY
from core.router import router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# --- FastAPI 应用实例 ---
app = FastAPI(title="WeChat OAuth Demo App")

# --- 中间件 --- (确保顺序)
# 跨域中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应配置具体的来源
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session 中间件 (用于存储 OAuth state)
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET_KEY,
    # https_only=True, # 生产环境建议启用
)

# --- 包含主路由 ---
app.include_router(router)


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head><title>WeChat OAuth Demo</title></head>
        <body>
            <h1>Login Options</h1>
            <p>请在微信内置浏览器中打开</p>
            <ul>
                <li><a href="/oauth/v1/auth/wechat/login">静默授权 (snsapi_base)</a></li>
                <li><a href="/oauth/v1/auth/wechat/login?scope=snsapi_userinfo">获取用户信息 (snsapi_userinfo)</a></li>
            </ul>
        </body>
    </html>
    """
