"""
FastAPI Server
HTTP boundary for Textcraft grammar checking and rephrasing.

Run with:
    python -m textcraft.api.server
"""

import os
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from textcraft.config.logging_config import configure_logging, get_logger
from textcraft.routes.text_routes import router as text_router
from textcraft.services.llm_service import LLMService

logger = get_logger(__name__)


# ============================================================
# FAST API SETUP
# ============================================================

def create_app(service: Optional[LLMService] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        service: Orchestrator to serve (None = built from environment at startup)
    """
    app = FastAPI(
        title="Textcraft API",
        description="Grammar checking and rephrasing over local and cloud LLMs",
        version="1.0.0"
    )

    # Desktop/web clients call from other origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(text_router)
    app.state.llm_service = service

    # ============================================================
    # SERVICE STARTUP/SHUTDOWN
    # ============================================================

    @app.on_event("startup")
    async def startup_services():
        logger.info("🚀 Starting Textcraft services...")
        if app.state.llm_service is None:
            app.state.llm_service = LLMService()
        logger.info("✅ Textcraft services started")

    @app.on_event("shutdown")
    async def shutdown_services():
        logger.info("🛑 Shutting down services...")
        if app.state.llm_service is not None:
            await app.state.llm_service.close()
        logger.info("✅ Services shutdown complete")

    # ============================================================
    # HEALTH & STATUS ENDPOINTS
    # ============================================================

    @app.get("/health")
    async def health_check():
        """Basic server health; use /api/ai/providers/status for backends."""
        if app.state.llm_service is None:
            return {
                "status": "starting",
                "timestamp": datetime.now().isoformat()
            }

        return {
            "status": "ok",
            "provider": app.state.llm_service.settings.mode.value,
            "timestamp": datetime.now().isoformat()
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        app,
        host=os.getenv("TEXTCRAFT_HOST", "0.0.0.0"),
        port=int(os.getenv("TEXTCRAFT_PORT", "8000")),
    )
