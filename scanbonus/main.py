"""
FastAPI Backend for Report Card Scan & Bonus
Scans report cards and turns grades into reward points
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scanbonus.routes import scan, calculator
from scanbonus.config import settings
from scanbonus.core import BaseAPIException

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events"""
    # Startup
    logger.info("Starting Report Card Scan & Bonus API...")
    logger.info(f"Environment: {'development' if settings.DEBUG else 'production'}")

    for path in [settings.SCAN_CONFIG_FILE, settings.GRADING_SYSTEMS_FILE, settings.BONUS_FACTORS_FILE]:
        if not path.exists():
            logger.warning(f"Configuration file missing: {path}")

    yield

    # Shutdown
    logger.info("Shutting down Report Card Scan & Bonus API...")


app = FastAPI(
    title="Report Card Scan & Bonus API",
    description="Report card scanning and grade bonus calculation",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS configuration for the web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handlers
@app.exception_handler(BaseAPIException)
async def api_exception_handler(request: Request, exc: BaseAPIException):
    """Handle custom API exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "error_code": exc.error_code
        },
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "error_code": "INTERNAL_ERROR"
        }
    )


# Include routers
app.include_router(scan.router, prefix="/api/grades", tags=["Scan"])
app.include_router(calculator.router, prefix="/api/grades", tags=["Calculator"])


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "Report Card Scan & Bonus API",
        "version": API_VERSION,
        "status": "running",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "version": API_VERSION
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "scanbonus.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
