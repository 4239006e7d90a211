"""
Copilot Reviewer Backend - FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routers import assist, chat, config, documents, events, review
from services.config_manager import ConfigManager
from services.container import build_container
from services.errors import CopilotError

logger = logging.getLogger(__name__)

# Failure text shown by the editor, per command group
_FAILURE_PREFIXES = {
    "/api/review/fix": "Fix failed",
    "/api/review": "Review failed",
}


def _failure_prefix(path: str) -> str:
    # Saving a document runs a full review when reviewOnSave is on
    if path.startswith("/api/documents/") and path.endswith("/save"):
        return "Review failed"
    for route, text in _FAILURE_PREFIXES.items():
        if path.startswith(route):
            return text
    return "AI request failed"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    logger.info("[Backend] Starting Copilot Reviewer Backend...")
    config_manager = ConfigManager.get_instance()
    app.state.services = build_container(config_manager)
    logger.info("[Backend] Services initialized (config: %s)", config_manager.config_file)

    yield

    # Shutdown: documents, diagnostics and chat history are not persisted
    app.state.services.chat_session.clear()
    app.state.services.workspace.diagnostics.clear()
    logger.info("[Backend] Shutting down Copilot Reviewer Backend...")


app = FastAPI(
    title="Copilot Reviewer Backend",
    description="AI code review, fixes and chat for editor plugins",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for editor plugin communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # the plugin webview runs locally
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CopilotError)
async def copilot_error_handler(request: Request, exc: CopilotError):
    """Convert typed failures into a single error notification"""
    prefix = _failure_prefix(request.url.path)
    logger.warning("[Backend] %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": f"{prefix}: {exc}"},
    )


# Include routers
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(review.router, prefix="/api/review", tags=["review"])
app.include_router(assist.router, prefix="/api/assist", tags=["assist"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
app.include_router(config.router, prefix="/api/config", tags=["config"])
app.include_router(events.router, prefix="/api/events", tags=["events"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "copilot-reviewer-backend"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "127.0.0.1"), port=int(server.get("port", 8000)))
