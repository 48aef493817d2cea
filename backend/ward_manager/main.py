"""
Ward Manager - Patient Discharge & Daily Report API
Active roster, discharge workflow, daily census and PDF export.
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.config import settings
from .models.base import Base, engine
from .models import patient, daily_report  # noqa: F401  Ensure tables are registered
from .api import patients, census
from .seed_demo import seed_demo_data

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

if settings.WARD_BACKEND.lower() == "sql":
    # No migrations: tables are created in place
    Base.metadata.create_all(bind=engine)

    if settings.SEED_DEMO_DATA:
        seed_demo_data()

app = FastAPI(
    title="Ward Manager API",
    description=(
        "Hospital ward management: active roster, patient discharge, "
        "daily census by admission date and specialty, and PDF report export."
    ),
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(patients.router, prefix="/api/v1")
app.include_router(census.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": settings.APP_NAME, "version": settings.VERSION}
