"""Main FastAPI application module.

This module initializes the FastAPI application, registers all route handlers
and maps every error to a ``{"error": message}`` JSON body.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import setup_logging
from config import API_HOST, API_PORT, CORS_ALLOWED_ORIGINS
from core.database import init_db
from core.exceptions import GroupToolError
from api.routes import access_key, auth, channel, group, schedule_template, task, user, webhook

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="LIFF Group Tool API",
    description="Backend API for the LINE group companion tool: channels, tasks and schedules.",
    version="1.0.0",
)

CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization"]

# Configure CORS middleware. Browser preflights are answered here; any other
# OPTIONS request reaches the catch-all route below.
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
)

# Register route handlers
app.include_router(auth.router)
app.include_router(channel.router)
app.include_router(access_key.router)
app.include_router(group.router)
app.include_router(task.router)
app.include_router(schedule_template.router)
app.include_router(user.router)
app.include_router(webhook.router)


def cors_headers(request: Request) -> dict:
    """Access-Control-Allow-* headers for responses built outside CORSMiddleware."""
    headers = {
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }
    origin = request.headers.get("origin")
    if "*" in CORS_ALLOWED_ORIGINS:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin in CORS_ALLOWED_ORIGINS:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


def error_response(message: str, status_code: int, headers: dict = None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


@app.exception_handler(GroupToolError)
async def handle_group_tool_error(request: Request, exc: GroupToolError) -> JSONResponse:
    return error_response(exc.message, exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Routing is keyed on method and path together, so a known path with an
    # unsupported method is just another unmatched route.
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response("Not Found", status.HTTP_404_NOT_FOUND)
    return error_response(str(exc.detail), exc.status_code, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return error_response(message, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # This handler runs outside CORSMiddleware, so add the headers here.
    return error_response(
        str(exc) or "Internal Server Error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        cors_headers(request),
    )


@app.on_event("startup")
def startup_tasks() -> None:
    """Create database tables that do not exist yet."""
    init_db()


@app.get("/", tags=["Info"])
def root() -> dict:
    """API root path, returns API information and documentation links."""
    return {
        "name": "LIFF Group Tool API",
        "version": "1.0.0",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


@app.options("/{path:path}", include_in_schema=False)
def answer_options(path: str, request: Request) -> Response:
    """Answer any OPTIONS request with CORS headers and an empty body."""
    return Response(status_code=status.HTTP_200_OK, headers=cors_headers(request))


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    logger.info("Service address: %s", server_url)
    logger.info("API docs: %s/docs", server_url)

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
