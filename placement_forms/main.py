"""
Placement Forms - Main Application

FastAPI backend with:
- MongoDB for form templates, responses and student profiles
- S3-compatible object storage for file answers
- JWT authentication (tokens issued by the account service)

Run: uvicorn placement_forms.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from placement_forms.api.routes import api_router
from placement_forms.core.config import get_settings
from placement_forms.core.exceptions import FormEngineError
from placement_forms.db.mongodb import create_mongo_client, get_mongo_db, init_mongo_indexes, test_mongo_connection
from placement_forms.services.container import ServiceContainer
from placement_forms.services.file_storage import FileStorage

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Forms",
    description="""
    Dynamic form engine of the campus placement platform.

    ## Features
    - **Form builder**: Admins build typed form templates and publish them
    - **Auto-fill**: Fields bound to the student profile are pre-filled and locked
    - **Submissions**: Server-side validation with tamper checks on auto-filled fields
    - **Export**: All responses to a form as an Excel sheet
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(FormEngineError)
async def form_engine_error_handler(request: Request, exc: FormEngineError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Startup event
@app.on_event("startup")
async def startup_event():
    """Connect to MongoDB, build services, initialize indexes and storage."""
    client = create_mongo_client(settings)
    db = get_mongo_db(client, settings)
    app.state.mongo_client = client

    try:
        init_mongo_indexes(db)
        logger.info("MongoDB indexes initialized")
    except PyMongoError as e:
        logger.warning(f"MongoDB index initialization failed: {e}")

    storage = FileStorage(settings)
    storage.ensure_bucket_exists()

    app.state.services = ServiceContainer.from_database(db, storage=storage, settings=settings)


@app.on_event("shutdown")
async def shutdown_event():
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    client = getattr(app.state, "mongo_client", None)
    connected = client is not None and test_mongo_connection(client)
    return {
        "status": "healthy",
        "mongodb": "connected" if connected else "disconnected",
    }
