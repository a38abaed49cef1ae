"""
Main entry point for the Patient Health Tracker service.

This script initializes the FastAPI application, configures logging,
creates the database tables, starts the scheduler and includes the API
routers for patients, health records, screenings, diabetes metrics and
risk assessments.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import models
from .config import settings
from .database import engine
from .routes import diabetes_metrics, health_records, patients, risk_assessments, screenings
from .scheduler import log_due_risk_assessments

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Patients, health readings, screenings and diabetes metrics with derived risk levels.",
    version="1.0.0",
)

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

scheduler = BackgroundScheduler()


@app.on_event("startup")
def on_startup():
    # Create all database tables defined in models.py if they don't exist
    models.Base.metadata.create_all(bind=engine)

    if settings.SCHEDULER_ENABLED:
        scheduler.add_job(log_due_risk_assessments, 'cron', hour=settings.DUE_ASSESSMENT_CHECK_HOUR, minute=0)
        scheduler.start()
        logger.info("Scheduler started...")


@app.on_event("shutdown")
def on_shutdown():
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler shut down...")


app.include_router(patients.router, prefix=settings.API_V1_STR)
app.include_router(health_records.router, prefix=settings.API_V1_STR)
app.include_router(screenings.router, prefix=settings.API_V1_STR)
app.include_router(diabetes_metrics.router, prefix=settings.API_V1_STR)
app.include_router(risk_assessments.router, prefix=settings.API_V1_STR)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint for basic health check."""
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("health_tracker.main:app", host="0.0.0.0", port=8000)
