# community_action/main.py

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from community_action.api.deps import get_current_user
from community_action.api.v1.api import api_router
from community_action.core.config import settings
from community_action.core.logging import configure_logging
from community_action.db.init_db import init_db, seed_initial_data
from community_action.db.session import SessionLocal
from community_action.services.auth_service import AuthGateway, log_session_change
from community_action.web.routes_pages import not_found_page, router as pages_router

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.seed_demo_data:
        db = SessionLocal()
        try:
            seed_initial_data(db)
        finally:
            db.close()

    unsubscribe = app.state.auth.subscribe(log_session_change)
    try:
        yield
    finally:
        unsubscribe()


def create_application() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.auth = AuthGateway(settings)

    # ---------- CORS ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- STATIC FILES ----------
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # ---------- ROUTERS ----------
    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(pages_router)

    @app.get("/healthz", tags=["health"])
    def healthz():
        return {"status": "ok"}

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # API clients keep JSON errors; browsers get the rendered page.
        if exc.status_code != 404 or request.url.path.startswith(settings.api_v1_prefix):
            return await http_exception_handler(request, exc)
        user = get_current_user(request, request.app.state.auth)
        return not_found_page(request, user)

    return app


app = create_application()
