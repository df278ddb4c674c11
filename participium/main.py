# participium/main.py
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from participium import models  # noqa: F401 - register tables before create_all
from participium.api import auth, notifications, reports
from participium.config import settings
from participium.database import Base, engine
from participium.errors import (
    AppError,
    app_error_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from participium.logging_config import setup_logging
from participium.services.geofence import load_service_area

setup_logging()
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Fail fast on a missing or broken boundary file
load_service_area(settings.SERVICE_AREA_GEOJSON)

# Initialize FastAPI app
app = FastAPI(title="Participium API")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handlers
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Uploaded report photos
UPLOAD_DIR = Path(settings.UPLOAD_DIR)
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")

# API routers
app.include_router(auth.router)           # /auth/*
app.include_router(reports.router)        # /api/reports/*
app.include_router(notifications.router)  # /api/notifications/*

logger.info("Participium API started (env=%s)", settings.APP_ENV)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "Participium API is running",
        "version": "1.0.0",
    }
