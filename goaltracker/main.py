from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
from pathlib import Path

from goaltracker.database import engine, Base
from goaltracker import models  # Registers the documents table with Base
from goaltracker.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV,
    CORS_ALLOWED_ORIGINS, AUTO_EVALUATE_ENABLED, STORAGE_BACKEND
)
from goaltracker.exceptions import StorageException, ValidationException
from goaltracker.routes import (
    goals, company_goals, onboarding, time_entries, goal_history, evaluation,
    daily_rollover, metrics
)
from goaltracker.services.scheduler_service import start_scheduler, stop_scheduler

LOG_DIR = os.getenv("GOALTRACKER_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("GOALTRACKER_LOG_FILE", "app.log")

try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("goaltracker")

if STORAGE_BACKEND == "sql":
    Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Goal Tracker API",
    description="Time tracking, free-text goals and goal evaluation for law firms",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageException)
async def storage_exception_handler(request: Request, exc: StorageException):
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(ValidationException)
async def validation_exception_handler(request: Request, exc: ValidationException):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.on_event("startup")
async def startup_event():
    logger.info(f"Goal Tracker API started ({STORAGE_BACKEND} storage). Logging to: {log_path}")
    if AUTO_EVALUATE_ENABLED:
        start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Goal Tracker API")
    stop_scheduler()


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Goal Tracker API", "status": "active"}


app.include_router(goals.router)
app.include_router(company_goals.router)
app.include_router(onboarding.router)
app.include_router(time_entries.router)
app.include_router(goal_history.router)
app.include_router(evaluation.router)
app.include_router(daily_rollover.router)
app.include_router(metrics.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("goaltracker.main:app", host="0.0.0.0", port=8000, reload=False)
