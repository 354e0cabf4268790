"""Main FastAPI application for the document review service."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import get_settings, Settings
from .core.review_store import ReviewStore
from .core.review_workflow import ReviewWorkflow
from .api.routes import documents
from .models.requests import HealthResponse

SERVICE_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one documents folder and review file."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {settings.service_name} v{SERVICE_VERSION}")

        store = ReviewStore(settings.documents_root, settings.review_data_file)
        app.state.review_store = store
        app.state.review_workflow = ReviewWorkflow(store)

        collection = await store.load()
        logger.info(
            f"{settings.service_name} is ready: "
            f"{collection.metadata.total_documents} documents, "
            f"{collection.metadata.completed_reviews} completed"
        )

        yield

        logger.info("Shutdown complete")

    app = FastAPI(
        title="Legacy Labeler",
        description="Review service for scanned legacy documents",
        version=SERVICE_VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(documents.router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        store: ReviewStore = request.app.state.review_store
        root_exists = Path(store.documents_root).is_dir()
        data_exists = store.state_file.exists()

        return HealthResponse(
            status="healthy" if (root_exists and data_exists) else "degraded",
            service=settings.service_name,
            version=SERVICE_VERSION,
            documents_root_exists=root_exists,
            review_data_exists=data_exists,
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.service_name,
            "version": SERVICE_VERSION,
            "status": "running"
        }

    return app


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    import uvicorn
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
