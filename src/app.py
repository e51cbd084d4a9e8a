"""Mahalaxmi Group website service - contact form relay and site mode admin API."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from src.shared.admin.routes import router as admin_router
from src.shared.auth.routes import router as auth_router
from src.shared.contact.routes import router as contact_router
from src.shared.settings import get_settings
from src.shared.site_mode.store import get_site_mode_store

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}

app = FastAPI(
    title="Mahalaxmi Website Service",
    description="Contact form relay and site mode toggle for the Mahalaxmi Group website",
    version="2.0.0"
)


@app.on_event("startup")
async def startup_event():
    try:
        # Builds the store (and its table, for the SQL backend) up front
        get_site_mode_store()
        logging.info("Site mode store initialised on startup")
    except Exception as e:
        # Log error but don't crash the app; the store is built again on first use
        logging.error(f"Site mode store initialisation error on startup: {str(e)}")


def cors_headers(request: Request) -> dict:
    """CORS headers for allow-listed origins; other origins get none."""
    origin = request.headers.get("origin")
    if origin and origin in settings.ALLOWED_ORIGINS:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Vary": "Origin",
        }
    return {}


@app.middleware("http")
async def add_security_and_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in {**SECURITY_HEADERS, **cors_headers(request)}.items():
        response.headers[name] = value
    return response


# Added after the header middleware so it wraps it: session cookies are set on every response
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
    https_only=settings.SESSION_HTTPS_ONLY,
)

app.include_router(contact_router)
app.include_router(admin_router)
app.include_router(auth_router)


def error_content(detail) -> dict:
    """Render an exception detail as the ``{"error": ...}`` body the front-end expects."""
    if isinstance(detail, dict):
        return detail
    return {"error": detail if isinstance(detail, str) else str(detail)}


# Exception handlers run outside the header middleware for unhandled errors,
# so they add CORS headers themselves
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    headers = {**SECURITY_HEADERS, **cors_headers(request), **(exc.headers or {})}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(exc.detail),
        headers=headers
    )


@app.exception_handler(StarletteHTTPException)
async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
    headers = {**SECURITY_HEADERS, **cors_headers(request), **(exc.headers or {})}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(exc.detail),
        headers=headers
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request format"},
        headers={**SECURITY_HEADERS, **cors_headers(request)}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logging.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers={**SECURITY_HEADERS, **cors_headers(request)}
    )


@app.get("/")
async def root():
    return {"message": "Mahalaxmi website service is running", "status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
