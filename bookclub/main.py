from typing import Annotated
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from bookclub.core.config import settings
from bookclub.core.errors import StoreUnavailableError, register_exception_handlers
from bookclub.core.logging import get_logger, setup_logging
from bookclub.core.middleware_correlation import CorrelationIdMiddleware
from bookclub.db.session import get_db

# Routers
from bookclub.api.routes.authors import router as authors_router
from bookclub.api.routes.books import router as books_router


setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Bookclub Catalog API - authors and the books they wrote.",
    version="1.0.0",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
)

# CORS middleware - allow the catalog frontend to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)


# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": "1.0.0",
        "docs_url": "/docs",
        "endpoints": {
            "authors": f"{settings.API_PREFIX}/authors",
            "books": f"{settings.API_PREFIX}/books",
            "health": "/health",
        },
    }


@app.get("/health")
def health(request: Request, db: Annotated[Session, Depends(get_db)]):
    """Report whether the database answers."""
    try:
        _ = db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        get_logger(__name__, request).error("Health check failed")
        raise StoreUnavailableError("Database is unreachable") from e
    return {"status": "ok", "database": "ok"}


register_exception_handlers(app)

# Mount routers
api = APIRouter(prefix=settings.API_PREFIX)
api.include_router(authors_router)
api.include_router(books_router)
app.include_router(api)
