import logging
import traceback
from typing import Dict, Optional
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from app.api.api import api_router
from app.core.config import settings
from app.core.errors import GatewayError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=settings.API_VERSION,
        description="Gateway for running SQL on Redshift or PostgreSQL and proxying OpenAI chat completions",
        routes=app.routes,
    )

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.API_VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc"
)


def cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": ", ".join(settings.CORS_ALLOW_ORIGINS),
        "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
    }


def error_response(request: Request, status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Build an error body shaped like the route's normal response"""
    if request.url.path == f"{settings.API_PREFIX}/query":
        content = {"columns": [], "rows": [], "error": message}
    else:
        content = {"error": message}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError):
    logger.warning(f"{request.url.path} failed with {exc.status_code}: {exc.message}")
    return error_response(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return error_response(request, status.HTTP_400_BAD_REQUEST, f"Invalid request body: {details}")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions and log the stack trace"""
    error_msg = f"Unhandled error occurred: {str(exc)}"
    logger.error(f"{error_msg}\nRequest path: {request.url.path}\n{''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}")
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An internal server error occurred. The error has been logged.",
        # Runs outside CORSMiddleware
        headers=cors_headers(),
    )

# Override the openapi schema
app.openapi = custom_openapi

# Registered before CORSMiddleware so real preflights are answered by CORS first
@app.middleware("http")
async def options_middleware(request: Request, call_next):
    """Answer OPTIONS requests that are not CORS preflights"""
    if request.method != "OPTIONS":
        return await call_next(request)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=cors_headers())


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=CORS_METHODS,
    allow_headers=CORS_HEADERS,
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
