from contextlib import asynccontextmanager
import logging
from typing import Optional
from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded

from policy_monitor.api import model, score
from policy_monitor.middlewares.access_logger import AccessLoggingMiddleware
from policy_monitor.middlewares.logging import setup_logging
from policy_monitor.middlewares.security import (
    SecurityHeadersMiddleware,
    add_cors_middleware,
    add_rate_limit,
)
from policy_monitor.services.context import ScoringContext, build_context
from policy_monitor.services.result_store import ResultStore
from policy_monitor.utils.exception_handlers import (
    generic_exception_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    validation_exception_handler,
)
from policy_monitor.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.is_ready = False

    # Tests hand in a prebuilt context; otherwise provision the model and
    # load the lexical resources. StartupError propagates: no ready state.
    if app.state.context is None:
        try:
            app.state.context = build_context(settings)
        except Exception as e:
            logger.critical(f"🚨 Scoring context could not be built: {e}")
            raise

    app.state.results = ResultStore(app.state.context.settings.RESULT_CACHE_SIZE)
    app.state.is_ready = True
    logger.info(
        f"✅ Ready: K={app.state.context.model.num_topics}, "
        f"vocab={app.state.context.model.vocab_size}"
    )

    yield

    app.state.is_ready = False


def create_app(context: Optional[ScoringContext] = None) -> FastAPI:
    app = FastAPI(
        title="China Policy Monitor API",
        description="Score Chinese policy documents against a pre-trained structural topic model",
        version="1.0.0",
        lifespan=lifespan,
        debug=(not settings.ENV == "production"),
    )
    app.state.context = context
    app.state.is_ready = False

    # ===============
    # Middlewares
    # ===============
    add_cors_middleware(app)
    add_rate_limit(app)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AccessLoggingMiddleware)

    # ===============
    # Routers
    # ===============
    app.include_router(score.router)
    app.include_router(model.router)

    # ===============
    # Health Checks
    # ===============
    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/liveness", status_code=204)
    def liveness():
        return Response(status_code=204)

    @app.api_route("/readiness", methods=["GET", "HEAD"], status_code=200)
    def readiness():
        return {"status": "ready"} if app.state.is_ready else Response(status_code=503)

    # ===============
    # Global Error Handlers
    # ===============
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app


# ✅ SETUP LOGGING FIRST
setup_logging()

app = create_app()
