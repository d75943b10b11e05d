"""
Photo Map FastAPI Application

Main entry point for the photo map application, serving the REST API for
markers, photos and PIN authentication, and the Leaflet map page.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from logic import config
from logic.logging_config import setup_logging
from server.auth import router as auth_router
from server.errors import register_error_handlers
from server.markers import router as markers_router
from server.photos import router as photos_router
from server.routes import router as routes_router

setup_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the data directory before serving requests."""
    config.init_data_dirs()
    logger.info("Data directory ready at %s", config.DATA_DIR)
    yield


app = FastAPI(title=config.APP_NAME, version=config.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials="*" not in config.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Session-Token"],
)

register_error_handlers(app)

# Include all routers
app.include_router(routes_router)
app.include_router(auth_router)
app.include_router(markers_router)
app.include_router(photos_router)

# ============================================================
# Static Files
# ============================================================

app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")
