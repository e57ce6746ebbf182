import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html

# Import logging configuration
import logging_config  # noqa: F401

from Settings import HOST, PORT, SERVICE_NAME, SERVICE_VERSION, require_database_url
from ExceptionHandler import report_startup_error, setup_exception_handlers
from Controllers.TestController import router as test_router

# Get logger
logger = logging.getLogger(__name__)

# Lifespan context manager to handle startup/shutdown gracefully
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application lifespan events - startup and shutdown"""
    # A missing connection string is the one fatal startup condition
    require_database_url()
    logger.warning(f"Starting {SERVICE_NAME}...")
    try:
        yield
    except asyncio.CancelledError:
        # Gracefully handle cancellation during shutdown
        logger.warning("Application shutdown requested")
        raise
    finally:
        logger.warning(f"Shutting down {SERVICE_NAME}...")

app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    description="Backend API Documentation",
    lifespan=lifespan,
    openapi_url="/swagger.json",
    docs_url=None,
    redoc_url=None,
)

# Setup global exception handlers FIRST (before other middleware)
setup_exception_handlers(app)

# CORS configuration - allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "*",
}

# Registered after CORSMiddleware so it runs first: every OPTIONS under /api/test
# succeeds with an empty body, whatever method or headers the pre-flight asks for
@app.middleware("http")
async def preflight(request: Request, call_next):
    if request.method == "OPTIONS" and request.url.path.startswith("/api/test"):
        return Response(status_code=200, headers=PREFLIGHT_HEADERS)
    return await call_next(request)

app.include_router(test_router)

@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": f"{SERVICE_NAME} is running",
        "status": "ok",
        "swagger": "/swagger",
        "api": "/api/test"
    }

@app.get("/swagger", include_in_schema=False)
async def swagger_ui():
    """Interactive documentation page reading /swagger.json"""
    return get_swagger_ui_html(openapi_url=app.openapi_url, title=f"{SERVICE_NAME} - Swagger UI")

@app.get("/health", include_in_schema=False)
async def health():
    """Health check endpoint that doesn't require database"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME
    }

if __name__ == "__main__":
    import uvicorn
    try:
        require_database_url()
        logger.warning(f"Starting server on {HOST}:{PORT}")
        uvicorn.run(app, host=HOST, port=PORT, lifespan="on", log_level="warning")
    except Exception as startup_ex:
        logger.error(f"[STARTUP ERROR] Application failed to start: {startup_ex}", exc_info=True)
        report_startup_error(startup_ex)
        raise  # Re-raise to exit with error code
