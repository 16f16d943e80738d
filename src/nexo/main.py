"""
nexo/main.py — Ponto de entrada da API do Nexo.

Inicializa o banco, registra as rotas, os handlers de erro
e a política CORS fixa das rotas acessadas por API key.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from nexo import __version__
from nexo.config import settings
from nexo.database import close_db, init_db
from nexo.errors import register_error_handlers
from nexo.logging_setup import setup_logging
from nexo.middlewares.auth import API_KEY_HEADER
from nexo.routes.admin_routes import router as admin_router
from nexo.routes.event_routes import router as event_router
from nexo.routes.key_routes import router as key_router
from nexo.routes.shopping_routes import router as shopping_router

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", API_KEY_HEADER]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ---------- Startup ----------
    setup_logging()
    logger.info(f"🏠 {settings.APP_NAME} iniciando…")
    await init_db()
    if not settings.admin_ids:
        logger.warning("⚠️ ADMIN_USER_IDS vazio — painel /admin/api-keys inacessível.")

    yield

    # ---------- Shutdown ----------
    logger.info("🛑 Encerrando servidor.")
    await close_db()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        description="Compras, agenda e acesso externo por API key para o household.",
        lifespan=lifespan,
        docs_url="/docs" if settings.APP_ENV == "development" else None,
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    register_error_handlers(app)

    app.include_router(key_router)
    app.include_router(admin_router)
    app.include_router(shopping_router)
    app.include_router(event_router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "service": settings.APP_NAME}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "nexo.main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development",
    )
