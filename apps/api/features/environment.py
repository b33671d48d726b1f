# features/environment.py
from datetime import datetime, timedelta, timezone
from typing import Iterator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.cache import TTLCache
from app.dependencies import get_aggregate_cache, get_db
from app.repositories.schema import metadata, photo_metadata


def before_all(context):
    # SQLite in-memory DB
    context.engine = create_engine("sqlite+pysqlite:///:memory:", future=True, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    context.Session = sessionmaker(bind=context.engine, autoflush=False, autocommit=False, future=True)
    metadata.create_all(context.engine)

    # Seed dataset
    seed(context)

    # Override DI to use our in-memory session and a per-run cache
    def _get_db() -> Iterator:
        db = context.Session()
        try:
            yield db
        finally:
            db.close()
    app.dependency_overrides[get_db] = _get_db
    context.cache = TTLCache(ttl_seconds=300)
    app.dependency_overrides[get_aggregate_cache] = lambda: context.cache

    # HTTP client
    context.client = TestClient(app)

    # Shared test state
    context.gallery_url = "/api/v1/gallery"
    context.last_response = None


def after_all(context):
    app.dependency_overrides.clear()


def seed(context):
    S = context.Session()
    tz = timezone.utc
    context.rows = []

    def add_photo(i: int, **kw):
        row = {
            "photo_id": f"ph_{i:04d}",
            "image_url": f"https://img.example/{i:04d}.jpg",
            "thumbnail_url": f"https://img.example/{i:04d}_t.jpg",
            "album_key": kw.get("album_key"),
            "upload_date": datetime(2024, 1, 6, 12, tzinfo=tz) + timedelta(hours=i),
            "sharpness": kw.get("sharpness", 7.0),
            "sport_type": kw.get("sport_type"),
            "photo_category": kw.get("photo_category"),
            "play_type": kw.get("play_type"),
            "action_intensity": kw.get("action_intensity"),
            "lighting": kw.get("lighting"),
            "color_temperature": kw.get("color_temperature"),
            "time_of_day": kw.get("time_of_day"),
            "composition": kw.get("composition"),
        }
        S.execute(photo_metadata.insert().values(**row))
        context.rows.append(row)

    # 40 volleyball photos: 25 natural, 10 backlit, 5 dramatic
    for i in range(40):
        add_photo(
            i,
            album_key="vb-finals",
            sport_type="volleyball",
            photo_category="action" if i % 4 else "celebration",
            play_type=("attack", "block", "dig", "set", "serve")[i % 5],
            action_intensity=("medium", "high", "peak")[i % 3],
            lighting="natural" if i < 25 else ("backlit" if i < 35 else "dramatic"),
            color_temperature="warm" if i % 2 else "cool",
            time_of_day="evening" if i % 2 else "golden_hour",
            composition="rule_of_thirds",
        )
    # 30 soccer photos, all outdoors at midday
    for i in range(40, 70):
        add_photo(
            i,
            album_key="soccer-league",
            sport_type="soccer",
            photo_category="action",
            action_intensity="high",
            lighting="natural" if i % 3 else "soft",
            color_temperature="neutral",
            time_of_day="midday",
            composition="leading_lines",
        )
    # Not yet enriched; never shown
    for i in range(70, 75):
        add_photo(i, sport_type="volleyball", lighting="natural", sharpness=None)

    S.commit()
    S.close()
