from datetime import datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from .astro_core.timeconv import validate_civil_date


# -----------------------------
# Request models
# -----------------------------
class BirthInput(BaseModel):
    """Birth moment and place for a natal chart."""

    year: int
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    hour: int = Field(0, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    tz_offset: Optional[float] = Field(
        None, ge=-14, le=14,
        description="UTC offset in hours, east positive (e.g. 5.5 for IST)",
    )
    tz_name: Optional[str] = Field(
        None,
        description="IANA timezone name; used when tz_offset is not given",
    )
    lat: float = Field(..., ge=-90, le=90, description="Latitude, e.g. 41.3083")
    lon: float = Field(..., ge=-180, le=180, description="Longitude, e.g. -72.9279")
    place: Optional[str] = None

    @field_validator("tz_name")
    @classmethod
    def validate_tz_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Invalid tz_name '{v}'. Use IANA like 'America/New_York'.")
        return v

    @model_validator(mode="after")
    def validate_date(self) -> "BirthInput":
        validate_civil_date(self.year, self.month, self.day, self.hour, self.minute)
        return self

    def offset_hours(self) -> float:
        """Explicit offset, else the zone's offset in effect at the birth moment, else UTC."""
        if self.tz_offset is not None:
            return self.tz_offset
        if self.tz_name is None:
            return 0.0
        dt_local = datetime(self.year, self.month, self.day, self.hour, self.minute, tzinfo=ZoneInfo(self.tz_name))
        return dt_local.utcoffset().total_seconds() / 3600.0


# -----------------------------
# Response models
# -----------------------------
class ZodiacModel(BaseModel):
    longitude: float
    sign: str
    sign_index: int
    degree: int
    minutes: int
    formatted: str


class PlanetModel(BaseModel):
    body: str
    longitude: float
    latitude: float
    distance: float
    speed: float
    retrograde: bool
    zodiac: ZodiacModel
    house: Optional[int] = None


class CuspModel(BaseModel):
    number: int
    longitude: float
    theme: str
    zodiac: ZodiacModel


class HousesModel(BaseModel):
    ascendant: ZodiacModel
    midheaven: ZodiacModel
    armc: float
    latitude_used: float
    cusps: List[CuspModel]


class AspectModel(BaseModel):
    first: str
    second: str
    name: str
    angle: float
    separation: float
    orb: float
    symbol: str
    nature: str
    exact: bool
    description: str


class OmittedModel(BaseModel):
    body: str
    reason: str


class BirthModel(BaseModel):
    year: int
    month: int
    day: int
    hour: int
    minute: int
    tz_offset: float


class UtcModel(BaseModel):
    year: int
    month: int
    day: int
    hour: float
    jd: float


class LocationModel(BaseModel):
    latitude: float
    longitude: float
    label: Optional[str] = None


class ChartResponse(BaseModel):
    birth: BirthModel
    utc: UtcModel
    jd: float
    location: LocationModel
    planets: Dict[str, PlanetModel]
    houses: HousesModel
    ascendant: ZodiacModel
    midheaven: ZodiacModel
    aspects: List[AspectModel]
    omitted: List[OmittedModel]


class SampleDateModel(BaseModel):
    year: int
    month: int
    day: int


class TransitSampleModel(BaseModel):
    date: SampleDateModel
    jd: float
    planets: Dict[str, PlanetModel]
    omitted: List[OmittedModel]


class HousePlacementModel(BaseModel):
    body: str
    house: int
    theme: str
    position: PlanetModel


class MonthlyTransitModel(BaseModel):
    month_index: int
    year: int
    month: int
    month_name: str
    transits_start: TransitSampleModel
    transits_mid: TransitSampleModel
    aspects: List[AspectModel]
    house_placements: Dict[str, HousePlacementModel]
    key_transits: List[AspectModel]


class TransitReportResponse(BaseModel):
    start_year: int
    start_month: int
    natal: ChartResponse
    months: List[MonthlyTransitModel]
