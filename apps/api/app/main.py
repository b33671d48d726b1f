import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import configure_logging
from app.dependencies import init_db
from app.routers.gallery import router as gallery_router

configure_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield

app = FastAPI(title="Sports Photo Gallery API", lifespan=lifespan)

# Mount routers
app.include_router(gallery_router, prefix="/api/v1")

# Store failures are not retried here; the client decides whether to reload
@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Photo store query failed for %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=503, content={"detail": "photo store unavailable"})

# Simple health for E2E bring-up
@app.get("/healthz")
def healthz():
    return {"status": "ok"}
