import logging
from sqlalchemy import and_, case, select, Table
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement
from typing import Iterable, List, Optional

from app.core.enums import INTENSITY_RANK, FacetKey, SortMode
from app.domain.facets import Facet, FacetCatalog, default_catalog
from app.domain.selection import Selection

logger = logging.getLogger(__name__)

GALLERY_COLUMNS = (
    "photo_id", "title", "image_url", "thumbnail_url", "album_key", "upload_date",
    "sport_type", "photo_category", "play_type", "action_intensity", "lighting",
    "color_temperature", "time_of_day", "composition",
)

def base_conditions(photos: Table, album_key: Optional[str] = None) -> List[ColumnElement]:
    # Only enriched photos are part of the gallery
    where = [photos.c.sharpness.is_not(None)]
    if album_key:
        where.append(photos.c.album_key == album_key)
    return where

def build_base_query(photos: Table, columns: Optional[Iterable] = None,
                     album_key: Optional[str] = None) -> Select:
    if columns is None:
        columns = [photos.c[name] for name in GALLERY_COLUMNS]
    return select(*columns).where(and_(*base_conditions(photos, album_key)))

def facet_predicate(photos: Table, facet: Facet, selected) -> ColumnElement:
    col = photos.c[facet.column]
    if facet.is_multi:
        return col.in_(facet.order(selected))
    return col == selected

def compose_filters(photos: Table, selection: Selection,
                    catalog: FacetCatalog = default_catalog,
                    exclude: Optional[FacetKey] = None) -> List[ColumnElement]:
    """One predicate per active facet, in canonical facet order, skipping exclude."""
    where = []
    for facet in catalog:
        if facet.key == exclude or not selection.is_active(facet.key):
            continue
        selected = selection.values_for(facet.key) if facet.is_multi else selection[facet.key]
        where.append(facet_predicate(photos, facet, selected))
    return where

def compose_query(base: Select, photos: Table, selection: Selection,
                  catalog: FacetCatalog = default_catalog,
                  exclude: Optional[FacetKey] = None) -> Select:
    where = compose_filters(photos, selection, catalog, exclude)
    if not where:
        return base
    logger.debug("Composed %d facet predicates (excluding %s)", len(where), exclude)
    return base.where(and_(*where))

def apply_sorting(query: Select, photos: Table, sort: SortMode) -> Select:
    tiebreak = photos.c.photo_id.asc()
    if sort == SortMode.oldest:
        return query.order_by(photos.c.upload_date.asc(), tiebreak)
    if sort == SortMode.action:
        return query.order_by(photos.c.play_type.is_(None), photos.c.play_type.asc(), tiebreak)
    if sort == SortMode.intensity:
        rank = case(INTENSITY_RANK, value=photos.c.action_intensity, else_=0)
        return query.order_by(rank.desc(), photos.c.upload_date.desc(), tiebreak)
    return query.order_by(photos.c.upload_date.desc(), tiebreak)

def apply_pagination(query: Select, offset: int, limit: int) -> Select:
    return query.offset(offset).limit(limit)
