from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from medstride.config import get_study_settings
from medstride.db import get_settings, verify_connection, close_client
from medstride.routers import (
    backup_router,
    exercises_router,
    mistakes_router,
    study_router,
    subjects_router,
)

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    study_settings = get_study_settings()

    print(f"✓ Due dates compared in timezone {study_settings.timezone}")

    if settings.is_configured():
        if verify_connection():
            print("✓ Connected to Cosmos DB")
        else:
            print("✗ Failed to connect to Cosmos DB - check configuration")
    else:
        print("⚠ Cosmos DB not configured (COSMOS_ENDPOINT not set, COSMOS_EMULATOR not enabled)")

    yield

    # Shutdown
    close_client()
    print("✓ Cosmos DB connection closed")


app = FastAPI(
    title="MedStride API",
    description="Spaced-repetition review scheduling for quiz exercises",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_study_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(exercises_router)
app.include_router(study_router)
app.include_router(mistakes_router)
app.include_router(subjects_router)
app.include_router(backup_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "MedStride API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/healthz",
            "exercises": "/exercises",
            "due": "/exercises/due",
            "study": "/study/{exercise_id}",
            "mistakes": "/mistakes",
            "subjects": "/subjects",
            "backup": "/backup",
        },
    }


@app.get("/healthz")
async def healthz():
    """Health check endpoint."""
    return {"status": "healthy"}
