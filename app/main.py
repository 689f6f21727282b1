from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import time

from app.config import settings
from app.database import init_db
from app.logging_config import configure_logging
from app.middleware.error_handler import register_exception_handlers

# Enable logging
access_logger = configure_logging()
logger = logging.getLogger(__name__)

# Init app
app = FastAPI(title="Phone OTP Service", version="1.0.0")

# CORS Setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000

    if settings.is_production:
        client = request.client.host if request.client else "-"
        access_logger.info(
            f'{client} "{request.method} {request.url.path} HTTP/{request.scope.get("http_version", "1.1")}" '
            f'{response.status_code} "{request.headers.get("user-agent", "-")}"'
        )
    else:
        access_logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms")
    return response


register_exception_handlers(app)

# Route Registrations
from app.routes import auth_router, health_router

routers = [
    auth_router,
    health_router,
]

for router in routers:
    app.include_router(router)
    logger.info(f"Included router: {router.prefix or '/'}")


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info("Phone OTP Service starting up...")
    init_db()
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info("Server is ready to handle requests")

# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Phone OTP Service shutting down...")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=settings.PORT,
        reload=True,
        log_level="info"
    )
