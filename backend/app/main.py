# File: backend/app/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from app.core.config import settings
from app.core.crypto import SecretError
from app.api.api import api_router
from app.db.database import engine, SessionLocal
from app.db import models

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROLE_NAMES = {
    models.USER_ROLE_ID: "user",
    models.ADMIN_ROLE_ID: "admin",
}


def seed_roles(db) -> None:
    for role_id, name in ROLE_NAMES.items():
        if db.query(models.Role).filter(models.Role.id == role_id).first() is None:
            logger.info(f"Seeding role {role_id} ({name})")
            db.add(models.Role(id=role_id, name=name))
    db.commit()


def init_db():
    """Create missing tables and the fixed role rows."""
    try:
        logger.info("Creating database tables if they don't exist...")
        models.Base.metadata.create_all(bind=engine, checkfirst=True)

        db = SessionLocal()
        try:
            seed_roles(db)
        finally:
            db.close()

        logger.info("Database initialization completed.")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")


# Initialize database
init_db()

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION
)

# Configure CORS with settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are client errors like any other missing field
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."
    return JSONResponse(status_code=400, content={"detail": message})


@app.exception_handler(SecretError)
async def secret_exception_handler(request: Request, exc: SecretError):
    logger.error(f"Secret handling failed on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Include API router
app.include_router(api_router)


@app.get("/")
def read_root():
    return {"status": "Resume Studio API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
