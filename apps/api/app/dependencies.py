from typing import Iterator
from fastapi import Depends, Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from app.core.cache import TTLCache
from app.core.config import AGGREGATE_CACHE_TTL_SECONDS, DATABASE_URL
from app.repositories.photos_repo import PhotosRepository
from app.repositories.schema import metadata
from app.services.gallery_service import GalleryService

# In tests, get_db() is overridden. This default is only for dev/prod.
_engine = create_engine(DATABASE_URL, future=True)
_SessionLocal = sessionmaker(bind=_engine, autoflush=False, autocommit=False, future=True)

def init_db() -> None:
    metadata.create_all(_engine)

def get_db() -> Iterator[Session]:
    db = _SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_aggregate_cache(request: Request) -> TTLCache:
    # One cache per application instance, created on first use
    cache = getattr(request.app.state, "aggregate_cache", None)
    if cache is None:
        cache = TTLCache(ttl_seconds=AGGREGATE_CACHE_TTL_SECONDS)
        request.app.state.aggregate_cache = cache
    return cache

def get_gallery_service(db: Session = Depends(get_db),
                        cache: TTLCache = Depends(get_aggregate_cache)) -> GalleryService:
    return GalleryService(repo=PhotosRepository(db), cache=cache)
