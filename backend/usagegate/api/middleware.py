"""Request middleware."""

import time
import traceback
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from usagegate.core.logging import logger


async def add_request_id(request: Request, call_next: callable) -> Response:
    """Attach a request id for log correlation."""
    request.state.request_id = str(uuid.uuid4())
    return await call_next(request)


async def log_requests(request: Request, call_next: callable) -> Response:
    """Log each handled request at debug; probes are frequent."""
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.debug(
        f"Handled request {request.method} {request.url.path} in {duration:.3f} seconds. "
        f"Response code: {response.status_code}",
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    return response


async def exception_logging_middleware(request: Request, call_next: callable) -> Response:
    """Log unhandled exceptions and answer with a 500."""
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")
        return JSONResponse(
            status_code=500,
            content={"detail": f"Internal Server Error: {exc.__class__.__name__}"},
        )
