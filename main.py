import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy.sql import text
import redis

from config.settings import settings
from services.suitability_engine.loader import CatalogValidationError, load_catalog_from_file
from src.core.logging_config import setup_logging
from src.db.cache import close_redis_client, get_redis_client
from src.db.database import SessionLocal, get_db, init_db
from src.routers import assessment as assessment_router
from src.services import storage

# Configure logging VERY early
setup_logging(settings.log_level, settings.service_name)
logger = logging.getLogger(__name__)


def seed_question_catalog(db: Session, catalog_path: str) -> int:
    """Fills an empty question table from the YAML seed catalog. Returns rows written."""
    if storage.count_questions(db) > 0:
        return 0
    if not os.path.isfile(catalog_path):
        logger.warning(f"Seed catalog not found at {catalog_path}; question table left empty.")
        return 0
    try:
        questions = load_catalog_from_file(catalog_path)
    except CatalogValidationError as e:
        logger.error(f"Seed catalog rejected: {e}")
        return 0
    return storage.replace_question_catalog(db, questions)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.seed_catalog_on_startup:
        db = SessionLocal()
        try:
            seeded = seed_question_catalog(db, settings.catalog_path)
            if seeded:
                logger.info(f"Seeded {seeded} questions from {settings.catalog_path}")
        finally:
            db.close()
    yield
    close_redis_client()


app = FastAPI(title="Business Suitability Assessment API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers ---
app.include_router(assessment_router.router, prefix="/api/v1", tags=["assessment"])


@app.get("/", tags=["Health Check"])
def read_root():
    """
    Root endpoint for basic health check.
    """
    return {"status": "ok", "message": "Business Suitability Assessment API is running."}

@app.get("/health/db", tags=["Health Check"])
def health_check_db(db: Session = Depends(get_db)):
    """
    Performs a database connection health check.
    """
    try:
        result = db.execute(text("SELECT 1")).scalar_one()
        return {"status": "ok", "db_check": result}
    except Exception as e:
        logger.error(f"DB health check failed: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail=f"Database connection error: {e}")

@app.get("/health/cache", tags=["Health Check"])
def health_check_cache():
    """
    Performs a draft cache health check with a PING.
    """
    try:
        get_redis_client().ping()
        return {"status": "ok", "cache_check": "ping_successful"}
    except redis.exceptions.RedisError as e:
        logger.error(f"Cache health check failed: {e}")
        raise HTTPException(status_code=503, detail=f"Cache connection error: {e}")
