import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .config import Settings, get_settings
from .database import build_engine, build_session_maker, init_db
from .routers import resume_router
from .services.demo_profile import seed_demo_profile
from .services.grading import GradingService
from .services.resume_store import ResumeStore, InMemoryResumeStore, SqlResumeStore

logger = logging.getLogger(__name__)


class NoCacheMiddleware(BaseHTTPMiddleware):
    """Prevents browser caching of API responses"""
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    grading_service: Optional[GradingService] = None,
    resume_store: Optional[ResumeStore] = None,
) -> FastAPI:
    """
    Build the API application.

    The Gemini credential is read once here; pass grading_service or
    resume_store to substitute collaborators (tests, embedding).
    """
    settings = settings or get_settings()
    configure_logging(settings)

    if grading_service is None:
        grading_service = GradingService.from_settings(settings)

    engine = None
    if resume_store is None:
        if settings.storage_backend == "sql":
            engine = build_engine(settings.database_url, echo=settings.debug)
            resume_store = SqlResumeStore(build_session_maker(engine))
        else:
            resume_store = InMemoryResumeStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if engine is not None:
            await init_db(engine)
        if settings.seed_demo_profile:
            await seed_demo_profile(resume_store, settings.default_student_id)
        logger.info(
            f"API Key Status: {'Loaded' if grading_service.is_configured else 'MISSING'}; "
            f"storage: {type(resume_store).__name__}"
        )
        yield
        # Shutdown
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Resume Builder API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,  # Disable docs in production
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.grading_service = grading_service
    app.state.resume_store = resume_store

    # CORS middleware - uses origins from environment variable
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(NoCacheMiddleware)

    app.include_router(resume_router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "status": "running", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        """Health check endpoint for load balancer"""
        return {
            "status": "healthy",
            "services": {
                "grading": "configured" if grading_service.is_configured else "missing_api_key",
                "storage": type(resume_store).__name__,
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3001)
