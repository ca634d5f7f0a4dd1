"""
AgriSmart Backend — Point d'entrée FastAPI.

Responsabilités :
  1. Configurer le logging
  2. Créer l'app FastAPI avec métadonnées
  3. Ajouter middlewares (CORS, request ID, error handler)
  4. Brancher le lifecycle (startup → ouvre le store ; shutdown → le ferme)
  5. Inclure les routes et servir l'UI buildée (STATIC_DIR) si présente
"""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from agrismart.api.routes import router
from agrismart.core.logger import setup_logging
from agrismart.core.security import generate_request_id
from agrismart.core.settings import Settings, settings as default_settings
from agrismart.services.advisory import AdvisoryService
from agrismart.services.db_handler import FarmDatabase

logger = logging.getLogger("AgriSmart")


# ── Lifecycle ────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / Shutdown hooks."""
    cfg: Settings = app.state.settings
    setup_logging(log_file=cfg.LOG_FILE)
    logger.info("🚀 Starting %s v%s …", cfg.APP_NAME, cfg.APP_VERSION)

    # Un store injecté (tests) reste la propriété de l'appelant
    owns_store = app.state.store is None
    if owns_store:
        app.state.store = FarmDatabase(cfg.DATABASE_URL)
    if app.state.advisory is None:
        app.state.advisory = AdvisoryService()

    yield  # ← app is running

    # Shutdown
    if owns_store:
        app.state.store.close()
        app.state.store = None
    logger.info("🛑 %s stopped.", cfg.APP_NAME)


class SPAStaticFiles(StaticFiles):
    """Fichiers de l'UI buildée ; toute route non-API inconnue retombe sur index.html."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404 or path == "api" or path.startswith("api/"):
                raise
            return await super().get_response("index.html", scope)


def _mount_spa(app: FastAPI, static_dir: Path) -> None:
    # Monté après le router : les routes /api gardent la priorité
    app.mount("/", SPAStaticFiles(directory=str(static_dir.resolve()), html=True), name="spa")


# ── App Factory ──────────────────────────────────────────────
def create_app(
    app_settings: Optional[Settings] = None,
    *,
    store: Optional[FarmDatabase] = None,
    advisory: Optional[AdvisoryService] = None,
) -> FastAPI:
    cfg = app_settings or default_settings

    app = FastAPI(
        title=cfg.APP_NAME,
        description="Farm management API — crops, tasks and AI advisory",
        version=cfg.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.store = store
    app.state.advisory = advisory

    # ── Middlewares ───────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s -> %s (%.1f ms) [%s]",
            request.method, request.url.path, response.status_code,
            (time.perf_counter() - started) * 1000, request_id,
        )
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all pour les erreurs non gérées → JSON propre."""
        logger.error(
            "Unhandled error on %s %s: %s",
            request.method, request.url.path, exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error. Please try again later."},
        )

    # ── Routes ───────────────────────────────────────────────
    app.include_router(router)

    static_dir = Path(cfg.STATIC_DIR)
    if (static_dir / "index.html").is_file():
        _mount_spa(app, static_dir)
    else:
        @app.get("/")
        def root():
            """Root endpoint."""
            return {
                "name": cfg.APP_NAME,
                "version": cfg.APP_VERSION,
                "status": "running",
                "docs": "/docs",
            }

    return app


app = create_app()


# ── Standalone runner ────────────────────────────────────────
def run() -> None:
    uvicorn.run(
        "agrismart.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
    )


if __name__ == "__main__":
    run()
