from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging
import time

logger = logging.getLogger("access")

QUIET_PATHS = {"/", "/health", "/liveness", "/readiness"}


class AccessLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        x_forwarded_for = request.headers.get("x-forwarded-for")
        if x_forwarded_for:
            ip = x_forwarded_for.split(",")[0].strip()
        else:
            ip = request.client.host if request.client else "-"

        path = request.url.path
        user_agent = request.headers.get("user-agent", "")

        # Probes from the orchestrator come without a user-agent
        if path in QUIET_PATHS and not user_agent:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            f"🛰️ {request.method} {path} -> {response.status_code} "
            f"in {(time.perf_counter() - start) * 1000:.0f}ms",
            extra={"ip": ip, "path": path, "user_agent": user_agent},
        )
        return response
