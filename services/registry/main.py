"""Service Registry - FastAPI application."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config import get_log_level, get_server_config
from services.notion_sync.client import NotionClientProvider
from services.notion_sync.connector import NotionSyncConnector

# Configure logging
logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "AXT-MCP"
SERVICE_VERSION = "1.0.0"
NOTION_CONNECTOR = "notion_sync"

# Global instances
notion_provider: Optional[NotionClientProvider] = None
# Connector handed to callers of this process (sync jobs, scripts)
notion_connector: Optional[NotionSyncConnector] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    global notion_provider, notion_connector

    logger.info("Service Registry starting up...")

    # The Notion client itself is built on first use
    notion_provider = NotionClientProvider()
    notion_connector = NotionSyncConnector(notion_provider)

    yield

    # Cleanup
    await notion_provider.aclose()
    logger.info("Service Registry shutting down...")


# Create FastAPI application
app = FastAPI(
    title="AXT-MCP Service Registry",
    description="Registry of MCP services, models and connectors",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Error handling middleware
@app.middleware("http")
async def error_handling_middleware(request: Request, call_next):
    """Global error handling middleware."""
    try:
        response = await call_next(request)
        return response
    except Exception as exc:
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": str(exc)
            }
        )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render unknown routes and methods as a JSON not-found body."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        # Any OPTIONS request is acknowledged, preflight or not
        if request.method == "OPTIONS":
            return Response(status_code=status.HTTP_200_OK)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Not found",
                "message": f"Route {request.method} {request.url.path} not found"
            }
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


# Response models
class HealthResponse(BaseModel):
    """Response model for the health check."""
    status: str
    service: str
    version: str
    timestamp: str


class RootResponse(BaseModel):
    """Response model for the root endpoint."""
    message: str
    version: str
    endpoints: Dict[str, str]


class RegistryResponse(BaseModel):
    """Response model for the registry listing."""
    message: str
    services: List[str] = []
    models: List[str] = []


class ConnectorsResponse(BaseModel):
    """Response model for the connector listing."""
    message: str
    available: List[str] = []
    loaded: List[str] = []


# Health check endpoint
@app.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat()
    )


@app.get("/", response_model=RootResponse, status_code=status.HTTP_200_OK)
async def root():
    """Root endpoint."""
    return RootResponse(
        message=f"{SERVICE_NAME} Service Registry",
        version=SERVICE_VERSION,
        endpoints={
            "health": "/health",
            "registry": "/registry",
            "connectors": "/connectors"
        }
    )


@app.get("/registry", response_model=RegistryResponse, status_code=status.HTTP_200_OK)
async def registry():
    """Registry endpoint placeholder."""
    return RegistryResponse(message="Registry endpoint")


@app.get("/connectors", response_model=ConnectorsResponse, status_code=status.HTTP_200_OK)
async def connectors():
    """List available connectors and those whose client has been built."""
    loaded = []
    if notion_provider is not None and notion_provider.initialized:
        loaded.append(NOTION_CONNECTOR)

    return ConnectorsResponse(
        message="Connectors endpoint",
        available=[NOTION_CONNECTOR],
        loaded=loaded
    )


if __name__ == "__main__":
    import uvicorn

    server_config = get_server_config()
    logger.info(f"{SERVICE_NAME} server running on http://{server_config['host']}:{server_config['port']}")
    uvicorn.run(app, host=server_config["host"], port=server_config["port"])
