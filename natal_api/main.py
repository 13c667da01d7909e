import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .schemas import BirthInput, ChartResponse, TransitReportResponse
from .astro_core.settings import init_logging
from .astro_core.errors import AstroCoreError, DegenerateGeometryError, InputError
from .astro_core.chart import GeoCoordinate, NatalChart, build_natal_chart
from .astro_core.transits import calculate_12_month_transits, key_transits, significant_transits

logger = logging.getLogger("natal_api")

app = FastAPI(
    title="Natal Transit API",
    description="Natal chart and twelve-month transit calculations",
    version="1.0.0",
)


@app.on_event("startup")
def _startup():
    init_logging()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    logger.info("INCOMING %s %s", request.method, request.url)

    response = await call_next(request)

    ct = response.headers.get("content-type", "")
    cl = response.headers.get("content-length", "")
    ms = int((time.time() - start) * 1000)
    logger.info("STATUS %s ct=%s len=%s ms=%s path=%s", response.status_code, ct, cl, ms, request.url.path)
    return response


# -----------------------------
# Exception handlers
# -----------------------------
def _error(status_code: int, name: str, message: str, detail=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": name, "message": message, "detail": detail},
    )


@app.exception_handler(InputError)
async def input_error_handler(request: Request, exc: InputError):
    return _error(422, "InputError", str(exc))


@app.exception_handler(DegenerateGeometryError)
async def degenerate_geometry_handler(request: Request, exc: DegenerateGeometryError):
    return _error(422, type(exc).__name__, str(exc))


@app.exception_handler(AstroCoreError)
async def astro_core_error_handler(request: Request, exc: AstroCoreError):
    logger.error("Calculation failed: %s", exc)
    return _error(500, type(exc).__name__, str(exc))


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return _error(422, "ValidationError", str(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(422, "ValidationError", "Request validation failed", exc.errors())


# -----------------------------
# Routes
# -----------------------------
def natal_from_input(birth: BirthInput) -> NatalChart:
    return build_natal_chart(
        birth.year,
        birth.month,
        birth.day,
        birth.hour,
        birth.minute,
        birth.offset_hours(),
        location=GeoCoordinate(latitude=birth.lat, longitude=birth.lon, label=birth.place),
    )


@app.get("/")
def home():
    return {"status": "Natal Transit API is running"}


@app.api_route("/", methods=["HEAD"], include_in_schema=False)
def home_head():
    return Response(status_code=200)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/chart", response_model=ChartResponse)
def chart(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    tz_offset: Optional[float] = Query(None, description="UTC offset in hours, e.g. 5.5"),
    tz_name: Optional[str] = Query(None, description="IANA timezone, e.g. 'America/New_York'"),
    lat: float = Query(..., description="Latitude, e.g. 41.3083"),
    lon: float = Query(..., description="Longitude, e.g. -72.9279"),
    place: Optional[str] = None,
):
    birth = BirthInput(
        year=year, month=month, day=day, hour=hour, minute=minute,
        tz_offset=tz_offset, tz_name=tz_name, lat=lat, lon=lon, place=place,
    )
    return natal_from_input(birth).to_json()


@app.get("/transits", response_model=TransitReportResponse)
def transits(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    tz_offset: Optional[float] = Query(None),
    tz_name: Optional[str] = Query(None),
    lat: float = Query(...),
    lon: float = Query(...),
    place: Optional[str] = None,
    # defaults to the current UTC month
    start_year: Optional[int] = Query(None),
    start_month: Optional[int] = Query(None, ge=1, le=12),
    significant_only: bool = False,
):
    birth = BirthInput(
        year=year, month=month, day=day, hour=hour, minute=minute,
        tz_offset=tz_offset, tz_name=tz_name, lat=lat, lon=lon, place=place,
    )
    natal = natal_from_input(birth)

    now = datetime.now(timezone.utc)
    start_year = start_year if start_year is not None else now.year
    start_month = start_month if start_month is not None else now.month

    months = []
    for mt in calculate_12_month_transits(start_year, start_month, natal):
        payload = mt.to_json()
        aspects = significant_transits(mt.aspects) if significant_only else list(mt.aspects)
        payload["aspects"] = [a.to_json() for a in aspects]
        payload["key_transits"] = [a.to_json() for a in key_transits(aspects)]
        months.append(payload)

    return {
        "start_year": start_year,
        "start_month": start_month,
        "natal": natal.to_json(),
        "months": months,
    }
