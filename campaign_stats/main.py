"""
Painel de Broadcasts - API de estatisticas
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campaign_stats.core.config import settings
from campaign_stats.core.logging import setup_logging
from campaign_stats.api.error_handlers import register_exception_handlers
from campaign_stats.api.routes import broadcast_stats, health

# Configurar logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gerencia startup e shutdown da aplicação."""
    logger.info(f"Iniciando {settings.APP_NAME}...")
    yield
    # Timer pendente morre com o loop
    broadcast_stats.broadcast_stats_service.coalescer.cancel()
    logger.info(f"Encerrando {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Estatisticas consolidadas de campanhas de broadcast",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Rotas
app.include_router(health.router, tags=["Health"])
app.include_router(broadcast_stats.router)


@app.get("/")
async def root():
    """Endpoint raiz."""
    return {
        "app": settings.APP_NAME,
        "status": "running",
        "docs": "/docs",
    }
