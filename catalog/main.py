from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging
import traceback

import uvicorn

from catalog.config import Settings, get_settings
from catalog.database import Base, build_engine, build_session_factory
from catalog.api import products, health
from catalog.services.seed import seed_sample_data
from catalog.utils.method_override import MethodOverrideMiddleware
from catalog.utils.templates import TemplateRenderer, get_renderer

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting up {settings.APP_NAME} ({settings.ENV})...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("Database tables created successfully")

    if settings.SEED_SAMPLE_DATA:
        db = app.state.session_factory()
        try:
            seed_sample_data(db)
        finally:
            db.close()

    yield

    # Shutdown
    logger.info("Shutting down application...")
    app.state.engine.dispose()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> HTMLResponse:
    """Render HTTP errors (404, 405, ...) with the error page."""
    message = exc.detail
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Page not found"

    response = request.app.state.renderer.render(
        request,
        "error.html",
        {"title": "Error", "status_code": exc.status_code, "message": message},
        status_code=exc.status_code,
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
    """Render any other error as a 500 page; the traceback is shown only in development."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)

    renderer: TemplateRenderer = request.app.state.renderer
    context = {"title": "Error", "status_code": 500, "message": str(exc) or "Something went wrong!"}
    if renderer.debug:
        context["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return renderer.render(request, "error.html", context, status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and everything it owns.

    The engine, session factory, renderer and settings live on ``app.state``;
    handlers reach them through dependencies instead of module globals.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
        A server-rendered product catalog with:

        - **Product Management**: create, list, view, edit and delete products
        - **Validation**: every invalid field is reported back on the form
        - **HTML forms**: PUT and DELETE are tunnelled over POST with `?_method=`
        """,
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.renderer = TemplateRenderer(settings.APP_NAME, debug=settings.is_development)

    app.add_middleware(MethodOverrideMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.include_router(health.router)
    app.include_router(products.router)

    @app.get("/", response_class=HTMLResponse, tags=["Root"])
    def home(request: Request, renderer: TemplateRenderer = Depends(get_renderer)):
        """Home page."""
        return renderer.render(request, "index.html", {"title": settings.APP_NAME})

    return app


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "catalog.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
    )
