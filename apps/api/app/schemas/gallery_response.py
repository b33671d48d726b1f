from pydantic import BaseModel
from typing import Dict, List, Optional

from app.core.enums import Cardinality, PillState

class PhotoHit(BaseModel):
    photo_id: str
    title: Optional[str] = None
    image_url: str
    thumbnail_url: Optional[str] = None
    album_key: Optional[str] = None
    upload_date: Optional[str] = None
    sport_type: Optional[str] = None
    photo_category: Optional[str] = None
    play_type: Optional[str] = None
    action_intensity: Optional[str] = None
    lighting: Optional[str] = None
    color_temperature: Optional[str] = None
    time_of_day: Optional[str] = None
    composition: Optional[str] = None

class Hits(BaseModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    items: List[PhotoHit]

class FacetOption(BaseModel):
    value: str
    count: int
    state: PillState = PillState.available
    badge: Optional[int] = None

class Distribution(BaseModel):
    name: str
    count: int
    percentage: float

class GalleryResponse(BaseModel):
    hits: Hits
    filter_counts: Dict[str, List[FacetOption]] = {}
    selection: Dict[str, List[str]] = {}
    query_string: str = ""
    active_filter_count: int = 0
    sports: List[Distribution] = []
    categories: List[Distribution] = []

class FilterCountsResponse(BaseModel):
    filter_counts: Dict[str, List[FacetOption]]
    selection: Dict[str, List[str]] = {}
    total: int

class ToggleResponse(BaseModel):
    selection: Dict[str, List[str]]
    query_string: str
    cleared: Dict[str, List[str]] = {}
    cleared_labels: List[str] = []

class FacetDescription(BaseModel):
    key: str
    label: str
    cardinality: Cardinality
    values: List[str]

class CatalogResponse(BaseModel):
    facets: List[FacetDescription]

class DistributionsResponse(BaseModel):
    sports: List[Distribution]
    categories: List[Distribution]
    base_filter_counts: Dict[str, List[FacetOption]]
