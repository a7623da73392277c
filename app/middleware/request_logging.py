from fastapi import Request
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app")

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        path = request.url.path
        query_string = request.url.query
        method = request.method

        logger.info(f"Request: {method} {path} {query_string}".rstrip())

        response = await call_next(request)

        process_time = time.perf_counter() - start_time

        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"Response: {method} {path} -> {response.status_code} in {process_time:.4f}s")

        return response
