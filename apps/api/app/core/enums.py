from enum import StrEnum

class FacetKey(StrEnum):
    # Declaration order is the canonical facet order used for query composition
    sport       = "sport"
    category    = "category"
    play_type   = "play_type"
    intensity   = "intensity"
    lighting    = "lighting"
    color_temp  = "color_temp"
    time_of_day = "time_of_day"
    composition = "composition"

    @property
    def column(self) -> str:
        return {
            FacetKey.sport:       "sport_type",
            FacetKey.category:    "photo_category",
            FacetKey.play_type:   "play_type",
            FacetKey.intensity:   "action_intensity",
            FacetKey.lighting:    "lighting",
            FacetKey.color_temp:  "color_temperature",
            FacetKey.time_of_day: "time_of_day",
            FacetKey.composition: "composition",
        }[self]

class Cardinality(StrEnum):
    single = "single"
    multi  = "multi"

class SortMode(StrEnum):
    newest    = "newest"
    oldest    = "oldest"
    action    = "action"
    intensity = "intensity"

class PillState(StrEnum):
    active    = "active"
    available = "available"
    disabled  = "disabled"

# Highest first; used by the "intensity" sort
INTENSITY_RANK = {"peak": 4, "high": 3, "medium": 2, "low": 1}
