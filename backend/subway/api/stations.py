"""Stations API endpoints."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.database import get_db
from subway.schemas.stations import StationRequest, StationResponse
from subway.services.station_service import StationService

router = APIRouter(prefix="/stations", tags=["stations"])


@router.post("", response_model=StationResponse, status_code=status.HTTP_201_CREATED)
async def create_station(
    request: StationRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> StationResponse:
    """
    Create a station.

    Raises:
        HTTPException: 409 if the name is taken
    """
    station = await StationService(db).create_station(request)
    response.headers["Location"] = f"/stations/{station.id}"
    return StationResponse.of(station)


@router.get("", response_model=list[StationResponse])
async def list_stations(db: AsyncSession = Depends(get_db)) -> list[StationResponse]:
    """List all stations."""
    stations = await StationService(db).list_stations()
    return [StationResponse.of(station) for station in stations]


@router.delete("/{station_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_station(station_id: int, db: AsyncSession = Depends(get_db)) -> None:
    """
    Delete a station.

    Raises:
        HTTPException: 404 if missing, 409 if a line section still references it
    """
    await StationService(db).delete_station(station_id)
