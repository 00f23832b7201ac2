from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from contextlib import asynccontextmanager
import datetime

# Import core modules
from core.config import settings
from core.dependencies import get_ledger_service, set_services
from services.ledger_service import LedgerService
from utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""

    logger.info(f"Starting {settings.APP_NAME}...")

    ledger = LedgerService()
    set_services(ledger)

    app.state.scheduler = None
    if settings.SCHEDULER_ENABLED:
        try:
            from core.scheduler import create_scheduler, schedule_daily_summary
            scheduler = create_scheduler()
            schedule_daily_summary(scheduler, ledger)
            scheduler.start()
            app.state.scheduler = scheduler
            logger.info("Scheduler started")
        except Exception as e:
            logger.warning(f"Failed to start scheduler: {e}")
    else:
        logger.info("Scheduler disabled")

    logger.info(f"Expense Tracker API is running on http://localhost:{settings.PORT}")

    yield

    # Cleanup
    logger.info(f"Shutting down {settings.APP_NAME}...")
    if app.state.scheduler is not None:
        try:
            app.state.scheduler.shutdown(wait=False)
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")
        app.state.scheduler = None

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="In-memory expense tracking API with spending analytics",
    version=settings.VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import routers after app creation to avoid circular imports
from api import ledger

# Ledger routes answer 200 with an error envelope for malformed input too
app.add_exception_handler(RequestValidationError, ledger.request_validation_handler)
app.include_router(ledger.router, tags=["Expenses"])

@app.get("/")
async def root():
    """Root endpoint for health check."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.VERSION,
        "status": "running",
    }

@app.get("/health")
async def health_check_endpoint():
    """Enhanced health check endpoint."""
    try:
        return {
            "status": "healthy",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "expenses": get_ledger_service().count,
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(status_code=503, detail="Service temporarily unavailable")

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        server_header=False,
    )
