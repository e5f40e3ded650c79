"""Location taxonomy endpoints.

Read-only views over the static region -> country -> city data that feeds
the cascading selectors.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from src.api.models import CityLookupResponse, LocationStatsResponse, OptionsResponse
from src.guide import taxonomy
from src.guide.city_resolver import CITY_NOT_FOUND, city_found_notice, resolve_city

router = APIRouter(prefix="/taxonomy", tags=["Taxonomy"])


@router.get("/regions", response_model=OptionsResponse, summary="List regions")
async def list_regions() -> OptionsResponse:
    return OptionsResponse(options=taxonomy.get_regions())


@router.get(
    "/regions/{region}/countries",
    response_model=OptionsResponse,
    summary="List countries of a region",
)
async def list_countries(region: str) -> OptionsResponse:
    countries = taxonomy.get_countries(region)
    if not countries:
        raise HTTPException(status_code=404, detail=f"Unknown region: {region}")
    return OptionsResponse(options=countries)


@router.get(
    "/regions/{region}/countries/{country}/cities",
    response_model=OptionsResponse,
    summary="List cities of a country",
)
async def list_cities(region: str, country: str) -> OptionsResponse:
    cities = taxonomy.get_cities(region, country)
    if not cities:
        raise HTTPException(status_code=404, detail=f"Unknown country: {region} / {country}")
    return OptionsResponse(options=cities)


@router.get("/cities", response_model=OptionsResponse, summary="All cities, flattened")
async def list_all_cities() -> OptionsResponse:
    """Every city in taxonomy order. Names shared by several countries repeat."""
    return OptionsResponse(options=taxonomy.get_all_cities())


@router.get("/stats", response_model=LocationStatsResponse, summary="Taxonomy size")
async def location_stats() -> LocationStatsResponse:
    return LocationStatsResponse(**taxonomy.get_location_stats())


@router.get("/resolve", response_model=CityLookupResponse, summary="Resolve a typed city name")
async def resolve(
    q: str = Query(..., max_length=255, description="What the user typed"),
    country: Optional[str] = Query(None, description="Only match cities in this country"),
) -> CityLookupResponse:
    match = resolve_city(q, scope=country)
    if match is None:
        return CityLookupResponse(notice=CITY_NOT_FOUND)
    return CityLookupResponse(
        notice=city_found_notice(match),
        city=match.city,
        region=match.region,
        country=match.country,
        exact=match.exact,
    )
