from pydantic import BaseModel, Field
from typing import Optional

from app.core.config import MAX_PAGE_SIZE, PAGE_SIZE
from app.core.enums import SortMode

class PageSpec(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

class BrowseRequest(BaseModel):
    sort: SortMode = SortMode.newest
    page: PageSpec = PageSpec()
    album: Optional[str] = None
