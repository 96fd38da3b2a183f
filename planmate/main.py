from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from planmate.api.endpoint import router as operation_router
from planmate.api.health import router as health_router
from planmate.core.config import Settings, get_settings
from planmate.core.context import AppContext
from planmate.core.logging import setup_logging, get_logger
from planmate.database import init_mongodb, close_mongo_connection
from planmate.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from planmate.middleware.logging_middleware import LoggingMiddleware
from planmate.stores import Stores, build_stores

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, stores: Optional[Stores] = None) -> FastAPI:
    """
    애플리케이션 생성

    stores 를 직접 넘기면 데이터베이스 초기화를 건너뜁니다 (테스트용).
    """
    settings = settings or get_settings()
    use_mongo = stores is None and settings.store_backend == "mongo"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        setup_logging(settings)
        if use_mongo:
            await init_mongodb(settings)
        app.state.context = AppContext.create(settings, stores or build_stores(settings))
        logger.info("Application started", extra={"store_backend": settings.store_backend})
        yield
        # Shutdown
        if use_mongo:
            await close_mongo_connection()

    app = FastAPI(title="PlanMate API", lifespan=lifespan)

    # lifespan 을 거치지 않는 테스트 클라이언트도 컨텍스트를 쓸 수 있도록 미리 설정
    if stores is not None:
        app.state.context = AppContext.create(settings, stores)

    app.add_middleware(ErrorHandlerMiddleware, debug=settings.debug)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(operation_router)

    return app


app = create_app()
