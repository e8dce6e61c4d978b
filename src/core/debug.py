# src/core/debug.py
import time
from dataclasses import dataclass, field
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from utils.logger import setup_logger

logger = setup_logger("DEBUG_CONTEXT")


@dataclass
class DebugContext:
    """Request counters for one running app; lives on ``app.state``"""

    environment: str
    api_calls: int = 0
    errors: int = 0
    total_time_ms: float = 0.0
    last_error: Optional[str] = field(default=None)

    def record(self, path: str, status_code: int, elapsed_ms: float) -> None:
        self.api_calls += 1
        self.total_time_ms += elapsed_ms
        if status_code >= 500:
            self.errors += 1
            self.last_error = f"{status_code} {path}"

    def record_exception(self, path: str, exc: Exception, elapsed_ms: float) -> None:
        self.api_calls += 1
        self.errors += 1
        self.total_time_ms += elapsed_ms
        self.last_error = f"{type(exc).__name__} {path}"

    @property
    def avg_load_time_ms(self) -> int:
        if not self.api_calls:
            return 0
        return round(self.total_time_ms / self.api_calls)

    @property
    def error_rate(self) -> float:
        if not self.api_calls:
            return 0.0
        return round(self.errors / self.api_calls * 100, 2)

    def snapshot(self) -> dict:
        return {
            "environment": self.environment,
            "api_calls": self.api_calls,
            "errors": self.errors,
            "avg_load_time_ms": self.avg_load_time_ms,
            "error_rate": self.error_rate,
            "last_error": self.last_error,
        }


class DebugTimingMiddleware(BaseHTTPMiddleware):
    """Feeds the app's DebugContext; a no-op when the app has none"""

    async def dispatch(self, request: Request, call_next):
        context = getattr(request.app.state, "debug_context", None)
        if context is None:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            context.record_exception(
                request.url.path, exc, (time.perf_counter() - started) * 1000
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        context.record(request.url.path, response.status_code, elapsed_ms)
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.1f}"
        return response
