# salonbook/core/middleware.py
"""Request tracing and access logging for the salon API"""
import uuid
import time
import logging
from starlette.requests import Request

logger = logging.getLogger(__name__)

# Probes hit these constantly; logging them drowns out real traffic
_QUIET_PREFIXES = ("/health",)


async def correlation_id_middleware(request: Request, call_next):
    """Attach a correlation ID to the request and echo it back"""
    correlation_id = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """Log one line per finished request with its timing"""
    if request.url.path.startswith(_QUIET_PREFIXES):
        return await call_next(request)

    started = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            f"{request.method} {request.url.path} raised",
            extra={"correlation_id": correlation_id}
        )
        raise

    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    response.headers["X-Response-Time-Ms"] = str(duration_ms)

    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "query": str(request.query_params),
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "client": request.client.host if request.client else "unknown",
        }
    )
    return response
