"""
Wine List Scanner API

FastAPI backend that reconciles parsed wine list items against Wine Labs,
enriches them with market prices and critic scores, and ranks them.

Usage:
    uvicorn main:app --reload
"""

# Load environment variables from .env file FIRST
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Config
from app.feature_flags import get_feature_flags

# Configure logging from environment
logging.basicConfig(
    level=getattr(logging, Config.log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)
logger.info(f"Starting with LOG_LEVEL={Config.log_level()}, USE_MOCKS={Config.use_mocks()}")

from app.routes import lists_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    flags = get_feature_flags()
    logger.info(
        f"Wine Labs proxy: {Config.winelabs_base_url()}, "
        f"web search model: {Config.web_search_model()}, "
        f"flags: {flags.model_dump()}"
    )
    if not Config.use_mocks() and not Config.gemini_api_key():
        logger.warning("GOOGLE_API_KEY not set; web search fallbacks will return no results")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Wine List Scanner API",
    description="Reconcile restaurant wine lists with market prices and critic scores",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web and mobile apps
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:8081",  # Expo web dev
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(lists_router, tags=["lists"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Wine List Scanner API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run probes."""
    return {"status": "healthy"}
