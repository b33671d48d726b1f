from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.dependencies import get_aggregate_cache, get_db
from app.core.cache import TTLCache
from app.repositories.schema import metadata, photo_metadata

BASE_TS = datetime(2024, 9, 1, 18, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:", future=True,
        connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def add_photo(db):
    """Insert one photo row; returns the row dict as inserted."""
    counter = {"n": 0}

    def _add(**kw) -> Dict[str, Any]:
        counter["n"] += 1
        n = counter["n"]
        row = {
            "photo_id": kw.pop("photo_id", f"p{n:04d}"),
            "title": None,
            "image_url": f"https://img.example/{n}.jpg",
            "thumbnail_url": None,
            "album_key": None,
            "upload_date": BASE_TS + timedelta(hours=n),
            "sharpness": 7.5,
            "sport_type": None,
            "photo_category": None,
            "play_type": None,
            "action_intensity": None,
            "lighting": None,
            "color_temperature": None,
            "time_of_day": None,
            "composition": None,
        }
        row.update(kw)
        db.execute(photo_metadata.insert().values(**row))
        db.commit()
        return row

    return _add


@pytest.fixture
def library(add_photo) -> List[Dict[str, Any]]:
    """
    40 enriched volleyball photos (25 natural, 10 backlit, 5 dramatic light),
    20 enriched basketball photos (10 natural, 10 soft) and 3 volleyball photos
    that have not been enriched yet.
    """
    rows = []
    for i in range(40):
        lighting = "natural" if i < 25 else ("backlit" if i < 35 else "dramatic")
        rows.append(add_photo(
            album_key="vb-2024",
            sport_type="volleyball",
            photo_category="action" if i % 2 == 0 else "celebration",
            play_type=("attack", "block", "dig", "set", "serve")[i % 5] if i < 35 else None,
            action_intensity=("low", "medium", "high", "peak")[i % 4],
            lighting=lighting,
            color_temperature="warm" if i % 3 == 0 else "cool",
            time_of_day="evening",
            composition="centered" if i % 2 == 0 else "rule_of_thirds",
        ))
    for j in range(20):
        rows.append(add_photo(
            album_key="bb-2024",
            sport_type="basketball",
            photo_category="action",
            action_intensity="high",
            lighting="natural" if j < 10 else "soft",
            color_temperature="neutral",
            time_of_day="night",
            composition="symmetry",
        ))
    for _ in range(3):
        rows.append(add_photo(
            album_key="vb-2024", sport_type="volleyball", lighting="natural", sharpness=None,
        ))
    return rows


@pytest.fixture
def client(engine):
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    def _get_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    cache = TTLCache(ttl_seconds=300)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_aggregate_cache] = lambda: cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
