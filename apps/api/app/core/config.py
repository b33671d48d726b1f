import logging
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./gallery.db")

# Gallery grid defaults
PAGE_SIZE = int(os.getenv("GALLERY_PAGE_SIZE", "24"))
MAX_PAGE_SIZE = int(os.getenv("GALLERY_MAX_PAGE_SIZE", "100"))

# Sport/category distributions and base filter counts are refreshed at most this often
AGGREGATE_CACHE_TTL_SECONDS = float(os.getenv("AGGREGATE_CACHE_TTL_SECONDS", "300"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
