from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from slowapi.errors import RateLimitExceeded

from . import __version__
from .endpoints import ROUTERS
from .endpoints.contact import limiter
from .exceptions.contact import TooManyRequestsError
from .logger import get_logger, setup_sentry
from .settings import settings


logger = get_logger(__name__)


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), camera=(), microphone=()",
    "Content-Security-Policy": "; ".join(
        [
            "default-src 'self'",
            "img-src 'self' data: https://maps.googleapis.com https://maps.gstatic.com",
            "script-src 'self' 'unsafe-inline' https://www.google.com/recaptcha/ https://www.gstatic.com/recaptcha/",
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com https://cdnjs.cloudflare.com",
            "font-src 'self' https://fonts.gstatic.com https://cdnjs.cloudflare.com",
            "frame-src https://www.google.com/",
        ]
    ),
}


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_sentry()
    logger.info(f"Starting {settings.site_name} website v{__version__} ({settings.environment.value})")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=f"{settings.site_name} Website",
    version=__version__,
    root_path=settings.root_path,
    debug=settings.debug,
    lifespan=lifespan,
    openapi_tags=[{"name": name, "description": doc} for name, (_, doc) in ROUTERS.items()],
)

app.state.limiter = limiter

for router, _ in ROUTERS.values():
    app.include_router(router)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> Response:
    logger.warning(f"Rate limit exceeded on {request.url.path} ({exc.detail})")
    return await http_exception_handler(request, TooManyRequestsError())


@app.middleware("http")
async def security_headers(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response
