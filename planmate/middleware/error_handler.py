from typing import Callable
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError, PyMongoError

from planmate.core.errors import (
    BaseCustomException,
    ErrorResponse,
    ValidationException,
    ValidationError
)
from planmate.core.logging import get_logger

logger = get_logger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    통합 에러 처리 미들웨어

    예외 핸들러가 처리하지 못한 예외를 표준화된 에러 응답으로 변환합니다.
    원인 상세는 debug 모드에서만 노출합니다.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"MongoDB connection error: {type(e).__name__}: {e}")
            return self._response(
                "store_failure",
                "Data store connection failed",
                status.HTTP_503_SERVICE_UNAVAILABLE,
                e
            )

        except PyMongoError as e:
            logger.error(f"MongoDB operation error: {e}")
            return self._response(
                "store_failure",
                "Data store operation failed",
                status.HTTP_503_SERVICE_UNAVAILABLE,
                e
            )

        except Exception as e:
            logger.error(f"Unhandled error: {type(e).__name__}: {e}", exc_info=True)
            return self._response(
                "internal_server_error",
                "An unexpected error occurred",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                e
            )

    def _response(self, error: str, message: str, status_code: int, exc: Exception) -> JSONResponse:
        body = ErrorResponse(
            error=error,
            message=message,
            status_code=status_code,
            details={"detail": str(exc)} if self.debug else None
        )
        return JSONResponse(status_code=status_code, content=body.model_dump())


async def custom_exception_handler(request: Request, exc: BaseCustomException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문 검증 실패를 표준 검증 에러 형식으로 변환"""
    validation = ValidationException(
        "Request validation failed",
        validation_errors=[
            ValidationError(
                field=".".join(str(loc) for loc in error["loc"]),
                message=error["msg"]
            )
            for error in exc.errors()
        ]
    )
    return JSONResponse(status_code=validation.status_code, content=validation.to_dict())


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(BaseCustomException, custom_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
