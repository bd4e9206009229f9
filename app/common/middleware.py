"""Request id propagation and access logging."""

import logging
import uuid
from time import perf_counter

from fastapi import Request

logger = logging.getLogger("request")


async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    logger.info("request.start", extra={"request_id": req_id, "path": request.url.path, "method": request.method})

    t0 = perf_counter()
    response = await call_next(request)
    duration_ms = int((perf_counter() - t0) * 1000)

    response.headers["X-Request-Id"] = req_id
    logger.info(
        "request.end",
        extra={
            "request_id": req_id,
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
