"""
요청 로깅 미들웨어

요청마다 request_id 를 부여(또는 X-Request-ID 헤더 재사용)하고
처리 결과를 구조화 로그로 남깁니다. 헬스 체크는 DEBUG 로만 기록합니다.
"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from planmate.core.logging import get_logger, set_request_context, clear_request_context, log_api_call

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATH_PREFIX = "/health"


def client_ip(request: Request) -> str:
    """프록시를 고려한 클라이언트 IP"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_request_context(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "event_type": "api_error",
                    "path": request.url.path,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "error_type": type(e).__name__
                },
                exc_info=True
            )
            raise
        else:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            if request.url.path.startswith(QUIET_PATH_PREFIX):
                logger.debug(f"{request.method} {request.url.path} - {response.status_code}")
            else:
                log_api_call(
                    logger,
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                    client_ip=client_ip(request)
                )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_context()
