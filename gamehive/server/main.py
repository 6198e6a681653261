"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from gamehive.server.routers import health, auth, games, reviews
from gamehive.server.settings import settings
from gamehive.server.deps import get_repositories, reset_repositories
from gamehive.server.security import warn_if_default_secret

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


# FastAPI 생명주기 관리
@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작/종료 시 실행되는 코드"""
    logger.info("Starting application...")

    # 저장소 백엔드 초기화 (설정 오류는 시작 시점에 드러나도록)
    get_repositories()
    logger.info("Storage backend ready: %s", settings.STORAGE_BACKEND)
    warn_if_default_secret()

    yield

    logger.info("Shutting down application...")
    if settings.STORAGE_BACKEND == "mongo":
        from gamehive.adapters.mongo import close_mongo_client
        close_mongo_client()
    reset_repositories()


# Create FastAPI app
app = FastAPI(
    title="GameHive API",
    description="Game catalog, reviews and accounts backed by Firebase or MongoDB",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """필수 필드 누락/빈 값은 422 대신 400으로 응답"""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        if first.get("type") == "missing":
            message = f"{field or 'body'} is required"
        else:
            message = f"{field or 'body'}: {first.get('msg')}"

    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message},
    )


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(games.router)
app.include_router(reviews.router)


@app.get("/")
async def root():
    """Root endpoint.

    Returns:
        Welcome message with API info
    """
    return {
        "message": "GameHive API",
        "version": "1.0.0",
        "backend": settings.STORAGE_BACKEND,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gamehive.server.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=True
    )
