"""FastAPI service exposing the batch trigger, health check and statistics."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from articlebot import __version__
from articlebot.core.errors import ConfigurationError
from articlebot.core.logging import get_logger, setup_logging
from articlebot.core.settings import Settings, get_settings
from articlebot.publisher.factory import build_pipeline, create_http_client, create_store
from articlebot.publisher.pipeline import PublishingPipeline


class GenerateRequest(BaseModel):
    count: Optional[int] = Field(default=None, ge=1, le=20)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_pipeline(request: Request) -> PublishingPipeline:
    return request.app.state.pipeline


def create_app(
    service_name: str = "publisher",
    settings: Optional[Settings] = None,
    pipeline: Optional[PublishingPipeline] = None,
) -> FastAPI:
    """Create FastAPI application; a pipeline is built on startup unless one is given."""
    settings = settings or get_settings()
    setup_logging(service_name, settings)
    logger = get_logger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if pipeline is not None:
            yield
            return
        store = create_store(settings)
        try:
            async with create_http_client(settings) as client:
                app.state.pipeline = build_pipeline(settings, client, store=store)
                logger.info(f"{service_name} pipeline ready")
                yield
        finally:
            await store.close()

    app = FastAPI(
        title=f"ArticleBot - {service_name.title()}",
        description=f"ArticleBot {service_name} service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    @app.get("/healthz")
    async def health_check(pipeline: PublishingPipeline = Depends(get_pipeline)):
        """Health check endpoint."""
        report = await pipeline.health_check()
        if report.healthy:
            logger.info(f"{service_name} health check passed")
        else:
            logger.error(f"{service_name} health check failed: {report.checks}")
        return JSONResponse(
            status_code=200 if report.healthy else 503,
            content={
                "status": "healthy" if report.healthy else "unhealthy",
                "service": service_name,
                "version": __version__,
                "checks": jsonable_encoder(report.checks),
                "timestamp": _timestamp(),
            },
        )

    @app.get("/stats")
    async def statistics(pipeline: PublishingPipeline = Depends(get_pipeline)):
        """Published post statistics."""
        stats = await pipeline.statistics()
        return {
            "service": service_name,
            "stats": jsonable_encoder(stats),
            "timestamp": _timestamp(),
        }

    @app.post("/cron/generate")
    async def trigger_generation(
        body: Optional[GenerateRequest] = None,
        authorization: Optional[str] = Header(default=None),
        pipeline: PublishingPipeline = Depends(get_pipeline),
    ):
        """Run one batch."""
        if settings.cron_secret and authorization != f"Bearer {settings.cron_secret}":
            logger.warning("Rejected batch trigger with invalid credentials")
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})

        count = body.count if body and body.count else settings.posts_per_run
        logger.info(f"Batch triggered via HTTP: count={count}")
        try:
            result = await pipeline.generate(count)
        except ConfigurationError as e:
            logger.error(f"Batch aborted: {e}")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Configuration error",
                    "details": str(e),
                    "missing": e.missing,
                    "timestamp": _timestamp(),
                },
            )

        return {
            "success": result.success,
            "message": f"Generated {result.stats.generated} of {result.stats.requested} posts",
            "result": jsonable_encoder(result),
            "timestamp": _timestamp(),
        }

    @app.get("/cron/generate")
    async def usage():
        return {
            "message": "POST to this endpoint to run a generation batch",
            "usage": {
                "method": "POST",
                "headers": {"Authorization": "Bearer <CRON_SECRET> (when configured)"},
                "body": {"count": f"optional, 1-20, default {settings.posts_per_run}"},
            },
        }

    return app
