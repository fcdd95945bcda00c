"""
FastAPI backend for the Wavee content workflow builder.

Runs node-graph workflows (trigger, idea, draft, media, platform,
conditional) against the content generation backend.
"""

from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from core.container import container
from core.logging import configure_logging, get_logger
from routers import workflow

# Initialize settings and logging
settings = container.settings()
configure_logging(settings)
logger = get_logger(__name__)

# Suppress noisy loggers
import logging
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Starting Wavee workflow service",
                content_api_url=settings.content_api_url,
                cycle_policy=settings.cycle_policy)
    yield

    await container.content_client().close()
    logger.info("Services shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Wavee Workflow Service",
    version="1.0.0",
    description="Content workflow execution backend",
    lifespan=lifespan,
    default_response_class=ORJSONResponse
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(workflow.router)


@app.get("/health")
async def health_check():
    """Health check."""
    return {
        "status": "OK",
        "service": "workflow",
        "version": app.version,
        "environment": "development" if settings.debug else "production",
        "timestamp": datetime.now().isoformat()
    }


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Wavee workflow service",
                host=settings.host, port=settings.port, debug=settings.debug)
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
