from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from studyflow.config import get_app_settings
from studyflow.db import get_settings, verify_connection, close_client
from studyflow.routers import (
    decks_router,
    cards_router,
    learn_router,
    progress_router,
    analytics_router,
)

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    app_settings = get_app_settings()

    if app_settings.fuzz_enabled:
        print("✓ Interval fuzz enabled")
    else:
        print("⚠ Interval fuzz DISABLED - review intervals are fully deterministic")

    if settings.is_configured():
        if verify_connection():
            print(f"✓ Connected to Cosmos DB (database: {settings.database_name})")
        else:
            print("✗ Failed to connect to Cosmos DB - check configuration")
    else:
        print("⚠ Cosmos DB not configured (COSMOS_ENDPOINT/COSMOS_EMULATOR not set)")

    yield

    # Shutdown
    close_client()
    print("✓ Cosmos DB connection closed")


app = FastAPI(
    title="StudyFlow API",
    description="Flashcard study backend with SM-2 spaced repetition",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_app_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(decks_router)
app.include_router(cards_router)
app.include_router(learn_router)
app.include_router(progress_router)
app.include_router(analytics_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "StudyFlow API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/healthz",
            "decks": "/decks",
            "cards": "/decks/{deck_id}/cards",
            "learn": "/learn",
            "progress": "/progress",
            "analytics": "/analytics",
        },
    }


@app.get("/healthz")
async def healthz():
    """Health check endpoint."""
    return {"status": "healthy"}
