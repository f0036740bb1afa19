"""Middleware que escribe una línea de log por petición.

Cada petición recibe un id aleatorio (`request.state.request_id`) para poder
seguirla en los logs; también se devuelve en la cabecera `X-Request-ID`.
"""

import logging
import time
from typing import Callable
from uuid import uuid4

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app.request")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        request_id = str(uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.exception(
                "request_id=%s client=%s method=%s path=%s status=%s duration_ms=%.2f UNHANDLED",
                request_id, client, method, path, 500, duration_ms,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            "request_id=%s client=%s method=%s path=%s status=%s duration_ms=%.2f",
            request_id, client, method, path, response.status_code, duration_ms,
        )
        response.headers["X-Request-ID"] = request_id
        return response


def register_request_logging(app: FastAPI) -> None:
    app.add_middleware(RequestLogMiddleware)
