from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from app.core.config import MAX_PAGE_SIZE, PAGE_SIZE
from app.core.enums import SortMode
from app.dependencies import get_gallery_service
from app.domain.selection import parse_selection
from app.schemas.gallery_request import BrowseRequest, PageSpec
from app.schemas.gallery_response import (
    CatalogResponse, DistributionsResponse, FilterCountsResponse, GalleryResponse, ToggleResponse,
)
from app.services.gallery_service import GalleryService

router = APIRouter(tags=["gallery"])

@router.get("/gallery", response_model=GalleryResponse)
def gallery_endpoint(
    request: Request,
    sort: SortMode = SortMode.newest,
    page: int = Query(1, ge=1),
    page_size: int = Query(PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    album: Optional[str] = None,
    svc: GalleryService = Depends(get_gallery_service),
) -> GalleryResponse:
    # Facet values come straight from the query string; invalid ones are dropped
    selection = parse_selection(request.query_params)
    req = BrowseRequest(sort=sort, page=PageSpec(page=page, page_size=page_size), album=album)
    return svc.browse(selection, req)

@router.get("/filters/counts", response_model=FilterCountsResponse)
def filter_counts_endpoint(
    request: Request,
    album: Optional[str] = None,
    svc: GalleryService = Depends(get_gallery_service),
) -> FilterCountsResponse:
    return svc.counts(parse_selection(request.query_params), album)

@router.get("/filters/toggle", response_model=ToggleResponse)
def toggle_endpoint(
    request: Request,
    facet: str,
    value: str,
    album: Optional[str] = None,
    svc: GalleryService = Depends(get_gallery_service),
) -> ToggleResponse:
    # "facet" and "value" are not facet keys, so they never leak into the selection
    return svc.toggle(parse_selection(request.query_params), facet, value, album)

@router.get("/filters/catalog", response_model=CatalogResponse)
def catalog_endpoint(svc: GalleryService = Depends(get_gallery_service)) -> CatalogResponse:
    return svc.catalog_description()

@router.get("/distributions", response_model=DistributionsResponse)
def distributions_endpoint(svc: GalleryService = Depends(get_gallery_service)) -> DistributionsResponse:
    return svc.overview()
