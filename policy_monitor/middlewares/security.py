# policy_monitor/middlewares/security.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from policy_monitor.core.config import settings


# ----------------------------
# Rate Limiting Configuration
# ----------------------------
limiter = Limiter(key_func=get_remote_address)


def add_rate_limit(app: FastAPI) -> None:
    app.state.limiter = limiter


# ----------------------------
# CORS Middleware
# ----------------------------
def add_cors_middleware(app: FastAPI) -> None:
    if settings.ENV == "local" or not settings.FRONTEND_ORIGIN:
        allow_origins = ["*"]
    else:
        allow_origins = [settings.FRONTEND_ORIGIN]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_origins != ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        # the browser needs the filename of the scored spreadsheet
        expose_headers=["Content-Disposition"],
    )


# ----------------------------
# Security Headers Middleware
# ----------------------------
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)

        # Enforce HTTPS
        response.headers["Strict-Transport-Security"] = (
            "max-age=63072000; includeSubDomains"
        )

        # MIME sniffing protection
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Prevent Clickjacking
        response.headers["X-Frame-Options"] = "DENY"

        # Don't leak referrer info
        response.headers["Referrer-Policy"] = "no-referrer"

        # The chart PNG may be embedded by the dashboard front end
        if not request.url.path.endswith("/chart"):
            response.headers["Content-Security-Policy"] = "default-src 'self'"
            response.headers["Cross-Origin-Resource-Policy"] = "same-origin"

        return response
