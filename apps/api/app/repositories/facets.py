from typing import Any, Dict, List, Optional
from sqlalchemy import select, func, Table
from sqlalchemy.orm import Session

from app.core.enums import FacetKey
from app.domain.facets import Facet, FacetCatalog, FacetValue, FilterCounts, default_catalog
from app.domain.selection import Selection
from app.repositories.query_builder import base_conditions, build_base_query, compose_query

def facet_counts(db: Session, photos: Table, facet: Facet, selection: Selection,
                 catalog: FacetCatalog = default_catalog,
                 album_key: Optional[str] = None) -> List[FacetValue]:
    """Counts per value of facet under every active filter except the facet's own."""
    col = photos.c[facet.column]
    base = build_base_query(photos, columns=[col, func.count()], album_key=album_key)
    query = compose_query(base, photos, selection, catalog, exclude=facet.key)
    query = query.where(col.in_(facet.allowed_values)).group_by(col)
    found = {value: int(cnt) for (value, cnt) in db.execute(query).all()}
    return [FacetValue(value=v, count=found.get(v, 0)) for v in facet.allowed_values]

def context_counts(db: Session, photos: Table, selection: Selection,
                   catalog: FacetCatalog = default_catalog,
                   album_key: Optional[str] = None) -> FilterCounts:
    return {
        facet.key: facet_counts(db, photos, facet, selection, catalog, album_key)
        for facet in catalog
    }

def distribution(db: Session, photos: Table, key: FacetKey) -> List[Dict[str, Any]]:
    """Unfiltered value distribution for one facet column, largest first."""
    col = photos.c[key.column]
    cnt = func.count().label("count")
    rows = db.execute(
        select(col, cnt)
        .where(*base_conditions(photos), col.is_not(None), col != "unknown")
        .group_by(col).order_by(cnt.desc(), col.asc())
    ).all()
    total = sum(int(c) for (_, c) in rows)
    return [
        {"name": name, "count": int(c), "percentage": round(int(c) * 100.0 / total, 1) if total else 0.0}
        for (name, c) in rows
    ]
