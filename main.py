"""
DA Cloud Filesystem - FastAPI应用主入口
"""
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings as default_settings
from app.core.logging import configure_logging
from app.db.database import create_engine_from_settings, create_session_factory
from app.api import filesystem
from app.services.entry_service import create_schema
from app.utils.auth import ServiceContext

logger = structlog.get_logger()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    创建FastAPI应用

    配置在此解析一次，之后以只读的 ServiceContext 形式挂在 app.state 上
    """
    settings = settings or default_settings
    configure_logging(settings)

    engine = create_engine_from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.AUTO_INIT_DB:
            async with engine.begin() as conn:
                await conn.run_sync(create_schema)
            logger.info("fs.startup.schema_ready")
        logger.info("fs.startup", source_id=settings.SOURCE_ID)
        yield
        await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="基于单表的远程文件系统API",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.service_context = ServiceContext(
        source_id=settings.SOURCE_ID,
        write_token=settings.DA_WRITE_TOKEN,
        recursive_delete=settings.RECURSIVE_DELETE
    )

    # 配置CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    # 注册路由
    app.include_router(filesystem.router)
    app.add_exception_handler(StarletteHTTPException, filesystem.http_exception_handler)

    @app.get("/")
    async def root():
        """根路径"""
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "source_id": settings.SOURCE_ID
        }

    @app.get("/health")
    async def health_check():
        """健康检查"""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG
    )
