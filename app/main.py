"""
Calculadora Price - FastAPI Application.
Server-rendered Price Table financing calculator with a JSON API,
reference rate lookup and audit logging with distributed tracing.
"""
from typing import Callable, Awaitable, Dict, Any
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import time
from uuid import uuid4

from app.core.config import settings
from app.core.logger import logger
from app.financiamento.router import router as financiamento_router
from app.taxas.router import router as taxas_router
from app.web_routes import router as web_router
from fastapi.staticfiles import StaticFiles
import os
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management (startup/shutdown hooks)."""
    # Startup
    logger.info(f"Initializing {settings.APP_NAME} v{settings.VERSION}")
    logger.info(f"Reference rate provider: {settings.RATE_API_URL}")

    yield

    # Shutdown
    logger.info("Shutting down application")


# FastAPI Application Factory
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description=(
        "Price Table (French amortization) financing calculator with optional "
        "reference rate lookup via BrasilAPI."
    ),
    lifespan=lifespan
)

# Trust X-Forwarded-Proto headers from the load balancer so canonical and sitemap URLs keep https
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for distributed tracing and logging
@app.middleware("http")
async def add_correlation_id(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """
    Middleware for distributed tracing.
    Injects a unique Correlation ID into the request context and propagates it to the response headers.
    """
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
    request.state.correlation_id = correlation_id

    start_time = time.time()

    logger.info(
        f"Request: {request.method} {request.url.path}",
        extra={"correlation_id": correlation_id}
    )

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Correlation-ID"] = correlation_id
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        f"Response: {response.status_code} | {process_time:.3f}s",
        extra={"correlation_id": correlation_id}
    )

    return response


# Router Registration
app.include_router(financiamento_router, prefix="/financiamento", tags=["Financing"])
app.include_router(taxas_router, prefix="/taxas", tags=["Rates"])

# Mount Static Files
static_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")
app.mount("/static", StaticFiles(directory=static_dir), name="static")

# Web UI Router (Frontend)
app.include_router(web_router, tags=["Web UI"])


@app.get("/api-info", tags=["Health"])
def api_info() -> Dict[str, Any]:
    """
    Endpoint exposing API metadata and service discovery links.
    """
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "online",
        "endpoints": {
            "ui": "/",
            "taxa": "/?acao=taxa",
            "simular": "/financiamento/simular",
            "taxa_referencia": "/taxas/referencia",
            "sitemap": "/sitemap.xml",
            "docs": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health", tags=["Health"])
def health_check() -> Dict[str, str]:
    """
    Liveness probe endpoint for orchestration systems.
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.VERSION
    }


# Global Exception Handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Serializes HTTP exceptions with the request's Correlation ID.
    """
    correlation_id = getattr(request.state, "correlation_id", "N/A")

    logger.info(
        f"HTTPException: {exc.status_code}",
        extra={"correlation_id": correlation_id}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "correlation_id": correlation_id}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception barrier.
    Captures unhandled exceptions, logs stack traces with Correlation IDs,
    and returns a sanitized 500 Internal Server Error response.
    """
    correlation_id = getattr(request.state, "correlation_id", "N/A")

    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra={"correlation_id": correlation_id}
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal Server Error",
            "correlation_id": correlation_id
        }
    )
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",  # nosec
        port=8000,
        reload=settings.DEBUG
    )
