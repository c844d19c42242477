from datetime import date
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

Pace = Literal["relaxed", "balanced", "packed"]
BudgetLevel = Literal["low", "mid", "high"]
CandidateCategory = Literal["restaurant", "attraction", "indoor_backup"]


# ====== trip ======
class TripDates(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class TripRequest(BaseModel):
    model_config = {"frozen": True}

    destination: str = Field(min_length=1)
    tripLengthDays: int = Field(ge=1, le=30)
    dates: TripDates = Field(default_factory=TripDates)
    travelers: int = Field(ge=1, le=20)
    budgetLevel: BudgetLevel
    pace: Pace
    interests: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    missingInfoQuestions: List[str] = Field(default_factory=list)


# ====== search / candidates ======
class SearchResult(BaseModel):
    title: str = ""
    url: str
    content: str = ""


class Candidate(BaseModel):
    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    category: CandidateCategory
    url: str
    notes: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must be an http(s) URL")
        return v


class AllowedLists(BaseModel):
    allowedAttractions: List[str] = Field(default_factory=list)
    allowedRestaurants: List[str] = Field(default_factory=list)
    allowedIndoorBackups: List[str] = Field(default_factory=list)


# ====== itinerary (shape only; business rules live in planner/validate.py) ======
class Block(BaseModel):
    time: str
    title: str
    details: Optional[str] = None


class DayPlan(BaseModel):
    day: int
    theme: str = ""
    blocks: List[Block] = Field(default_factory=list)
    meals: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)


class Itinerary(BaseModel):
    summary: str
    days: List[DayPlan]
    mustBook: List[str] = Field(default_factory=list)
    rainBackups: List[str] = Field(default_factory=list)
    estimatedDailyCostRange: Optional[str] = None


class ValidationResult(BaseModel):
    ok: bool
    violations: List[str] = Field(default_factory=list)


class QualityReport(BaseModel):
    score: float = 0
    issues: List[str] = Field(default_factory=list)
    fixes: List[str] = Field(default_factory=list)


# ====== /api/plan request ======
class HotelsOption(BaseModel):
    enabled: bool = False
    maxHotels: Optional[int] = Field(default=None, ge=1, le=20)


class PlanIntakeRequest(BaseModel):
    destination: str = Field(min_length=1)
    startDate: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    endDate: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    travelers: int = Field(default=1, ge=1, le=20)
    pace: Pace = "balanced"
    budgetLevel: BudgetLevel = "mid"
    constraints: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    hotels: Optional[HotelsOption] = None

    @model_validator(mode="after")
    def _check_range(self):
        start = date.fromisoformat(self.startDate)
        end = date.fromisoformat(self.endDate)
        days = (end - start).days + 1
        if days < 1:
            raise ValueError("endDate must not be before startDate")
        if days > 30:
            raise ValueError(f"trip length {days} days exceeds the 30 day maximum")
        return self

    def trip_length_days(self) -> int:
        # inclusive day count
        start = date.fromisoformat(self.startDate)
        end = date.fromisoformat(self.endDate)
        return max(1, (end - start).days + 1)


# ====== /api/plan response ======
class TimelineItem(BaseModel):
    kind: Literal["activity", "meal"]
    time: str
    title: Optional[str] = None
    details: Optional[str] = None
    mealType: Optional[str] = None
    place: Optional[str] = None
    dishIdea: Optional[str] = None


class TimelineDay(BaseModel):
    day: int
    theme: str
    timeline: List[TimelineItem]
    notes: List[str] = Field(default_factory=list)


class UiItinerary(BaseModel):
    summary: str
    days: List[TimelineDay]
    mustBook: List[str] = Field(default_factory=list)
    rainBackups: List[str] = Field(default_factory=list)


class PlaceMedia(BaseModel):
    placeId: str
    name: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[float] = None
    userRatingsTotal: Optional[int] = None
    mapsUrl: Optional[str] = None
    imageUrls: List[str] = Field(default_factory=list)


class HotelOption(BaseModel):
    name: str
    address: Optional[str] = None
    rating: Optional[float] = None
    userRatingsTotal: Optional[int] = None
    mapsUrl: Optional[str] = None
    imageUrls: List[str] = Field(default_factory=list)


class PlanResponse(BaseModel):
    itinerary: UiItinerary
    allowedLists: AllowedLists
    validation: ValidationResult
    hotels: Optional[List[HotelOption]] = None


# ====== /api/places/media ======
class PlacesMediaRequest(BaseModel):
    city: str = Field(min_length=1)
    places: List[str] = Field(default_factory=list)
    maxImagesPerPlace: int = Field(default=5, ge=1, le=10)
    concurrency: int = Field(default=6, ge=1, le=10)


class PlacesMediaResponse(BaseModel):
    media: Dict[str, PlaceMedia] = Field(default_factory=dict)


__all__ = [
    "TripRequest",
    "Candidate",
    "SearchResult",
    "AllowedLists",
    "Block",
    "DayPlan",
    "Itinerary",
    "ValidationResult",
    "QualityReport",
    "PlanIntakeRequest",
    "PlanResponse",
    "UiItinerary",
    "PlaceMedia",
    "HotelOption",
    "PlacesMediaRequest",
    "PlacesMediaResponse",
]
