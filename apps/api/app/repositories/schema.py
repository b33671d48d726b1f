from sqlalchemy import Column, DateTime, Float, MetaData, String, Table

metadata = MetaData()

# Enriched photo metadata; one row per photo. Facet columns hold a single value each.
photo_metadata = Table("photo_metadata", metadata,
    Column("photo_id", String, primary_key=True),
    Column("title", String),
    Column("image_url", String, nullable=False),
    Column("thumbnail_url", String),
    Column("album_key", String, index=True),
    Column("upload_date", DateTime(timezone=True)),
    # NULL until the enrichment pass has run; such photos are hidden from the gallery
    Column("sharpness", Float),
    Column("sport_type", String, index=True),
    Column("photo_category", String, index=True),
    Column("play_type", String),
    Column("action_intensity", String),
    Column("lighting", String),
    Column("color_temperature", String),
    Column("time_of_day", String),
    Column("composition", String),
)
