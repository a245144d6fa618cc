import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopfloor.api.health import router as health_router
from shopfloor.api.root import router as root_router
from shopfloor.api.articles import router as articles_router
from shopfloor.api.entries import router as entries_router
from shopfloor.api.metrics import router as metrics_router
from shopfloor.core.config import settings
from shopfloor.core.log_config import configure_logging
from shopfloor.core.metrics import MetricsRecorder

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Shop Floor Data Manager")

    # services are built here and handed to handlers via app.state
    app.state.metrics = MetricsRecorder(
        max_samples=settings.METRICS_MAX_SAMPLES,
        slow_p95_ms=settings.SEARCH_SLOW_P95_MS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(root_router)
    app.include_router(health_router)
    app.include_router(articles_router)
    app.include_router(entries_router)
    app.include_router(metrics_router)

    logger.info("App configured (env=%s)", settings.APP_ENV)
    return app


app = create_app()
