# Standard library imports
import logging

# Third-party imports
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Local imports
from config import get_settings
from event_routes import router as event_router
from runtime.errors import IntegrationError, InvalidRequest

# Plugin system
from plugin_manager import plugin_manager

# Get settings
settings = get_settings()

# Set up logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Integrations Proxy")

@app.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    """Answer integration errors with their message as plain text."""
    logger.info(f"{request.method} {request.url.path} failed with {exc.status_code}: {exc.message}")
    return PlainTextResponse(exc.message, status_code=exc.status_code)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unmatched paths and methods carry Starlette's default details
    if (exc.status_code, exc.detail) in ((404, "Not Found"), (405, "Method Not Allowed")):
        return PlainTextResponse(f"No route matching {request.method} {request.url}", status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Answer malformed request bodies and parameters like InvalidRequest."""
    logger.info(f"{request.method} {request.url.path} rejected: {exc.errors()}")
    fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
    return PlainTextResponse(f"Invalid request: {fields}", status_code=InvalidRequest.status_code)

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return PlainTextResponse("Internal Server Error", status_code=500)

# Initialize plugins first
if settings.PLUGINS_AUTO_DISCOVER:
    plugin_manager.discover_plugins()

# Register routers
app.include_router(event_router)

# Include service-specific routers from plugins
service_routers = plugin_manager.get_service_routers()
for service_name, router in service_routers.items():
    app.include_router(router, prefix=f"/{service_name}")
    logger.info(f"Mounted routes for service: {service_name}")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower()
    )
