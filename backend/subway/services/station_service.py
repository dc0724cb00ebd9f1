"""Station lookup and management service."""

import structlog
from fastapi import HTTPException, status
from sqlalchemy import exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.telemetry import service_span
from subway.models.line import Section
from subway.models.station import Station
from subway.schemas.stations import StationRequest

logger = structlog.get_logger(__name__)

SERVICE_NAME = "station-service"


class StationService:
    """Service for station lookup (used by lines) and station CRUD."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize the station service.

        Args:
            db: Database session
        """
        self.db = db

    async def get_station(self, station_id: int) -> Station:
        """
        Look up a station by id.

        Args:
            station_id: Station id

        Returns:
            Station row

        Raises:
            HTTPException: 404 if the station does not exist
        """
        with service_span("station.get", SERVICE_NAME, **{"station.id": station_id}):
            if not (station := await self.db.get(Station, station_id)):
                logger.info("station_not_found", station_id=station_id)
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Station {station_id} not found.",
                )
            return station

    async def list_stations(self) -> list[Station]:
        """List all stations ordered by id."""
        with service_span("station.list", SERVICE_NAME) as span:
            result = await self.db.execute(select(Station).order_by(Station.id))
            stations = list(result.scalars().all())
            span.set_attribute("station.result_count", len(stations))
            return stations

    async def create_station(self, request: StationRequest) -> Station:
        """
        Create a station.

        Raises:
            HTTPException: 409 if a station with the same name exists
        """
        with service_span("station.create", SERVICE_NAME):
            existing = await self.db.execute(select(Station.id).where(Station.name == request.name))
            if existing.scalar_one_or_none() is not None:
                raise self._name_conflict(request.name)

            station = Station(name=request.name)
            self.db.add(station)
            try:
                await self.db.commit()
            except IntegrityError as e:
                await self.db.rollback()
                raise self._name_conflict(request.name) from e
            await self.db.refresh(station)

            logger.info("station_created", station_id=station.id, name=station.name)
            return station

    async def delete_station(self, station_id: int) -> None:
        """
        Delete a station that no section references.

        Raises:
            HTTPException: 404 if not found, 409 if a line still uses it
        """
        with service_span("station.delete", SERVICE_NAME, **{"station.id": station_id}):
            station = await self.get_station(station_id)

            in_use = await self.db.scalar(
                select(
                    exists().where(
                        or_(Section.up_station_id == station_id, Section.down_station_id == station_id)
                    )
                )
            )
            if in_use:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Station {station_id} is used by a line section.",
                )

            await self.db.delete(station)
            await self.db.commit()
            logger.info("station_deleted", station_id=station_id)

    @staticmethod
    def _name_conflict(name: str) -> HTTPException:
        logger.info("station_name_conflict", name=name)
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Station name '{name}' already exists.",
        )
