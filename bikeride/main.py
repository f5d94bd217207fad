from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded

from .config import RATE_LIMIT, RATE_LIMIT_ENABLED
from .database import Base, engine
from .logging_config import setup_logging
from .routers import users, bikes, bookings, admin
from .error_handlers import register_exception_handlers

setup_logging()

# -----------------------------------------
# Create DB tables
# -----------------------------------------
Base.metadata.create_all(bind=engine)

# -----------------------------------------
# Rate Limiter
# RATE_LIMIT requests per client IP by default
# -----------------------------------------
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT],
    enabled=RATE_LIMIT_ENABLED,
)

app = FastAPI(
    title="BikeRide Rental Storefront",
    version="0.1.0",
    description="Bike catalog, instant and pre-reservation bookings, and admin management.",
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

register_exception_handlers(app)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded on {}", request.url.path)
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "error": "too_many_requests",
            "path": str(request.url.path),
        },
    )


# -----------------------------------------
# Routers (normal + versioned /api/v1)
# -----------------------------------------
app.include_router(users.router)
app.include_router(bikes.router)
app.include_router(bookings.router)
app.include_router(admin.router)

app.include_router(users.router, prefix="/api/v1")
app.include_router(bikes.router, prefix="/api/v1")
app.include_router(bookings.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")


@app.get("/health", tags=["health"])
def health_check():
    return {"status": "ok"}
