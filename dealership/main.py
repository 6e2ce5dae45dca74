from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
import logging
from dealership.api.api_router import api_router
from dealership.core.config import settings
from dealership.schemas.car_schemas import FORM_ERROR_KEY, CarValidationError

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events"""
    logger.info(f"🚀 Starting {settings.PROJECT_NAME} {settings.VERSION}...")

    yield

    logger.info(f"👋 {settings.PROJECT_NAME} shutdown complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend API for managing the dealership's car records.",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.4f}s")
    return response

@app.exception_handler(CarValidationError)
async def car_validation_exception_handler(request: Request, exc: CarValidationError):
    return JSONResponse(status_code=400, content={"errors": exc.errors})

@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed requests get the same 400 error shape as car validation."""
    errors = {}
    for error in exc.errors():
        # loc looks like ("body", "field") or ("query", "name"); a bare ("body",) is the whole payload
        loc = error.get("loc", ())
        field = str(loc[-1]) if len(loc) > 1 and isinstance(loc[-1], str) else FORM_ERROR_KEY
        errors.setdefault(field, error.get("msg", "Invalid value"))
    return JSONResponse(status_code=400, content={"errors": errors})

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/", tags=["Root"])
async def read_root():
    """A simple health check endpoint."""
    return {"status": "ok", "message": f"Welcome to {settings.PROJECT_NAME}!", "version": settings.VERSION}

@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION
    }
