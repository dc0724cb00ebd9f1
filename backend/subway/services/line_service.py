"""Line management service."""

import structlog
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.telemetry import service_span
from subway.models.line import Line, Section
from subway.repositories.line_repository import LineRepository
from subway.schemas.lines import CreateLineRequest, LineResponse, UpdateLineRequest
from subway.services.station_service import StationService

logger = structlog.get_logger(__name__)

SERVICE_NAME = "line-service"
LINE_NOT_FOUND_MESSAGE = "Line not found."


class LineService:
    """Service for the line create/list/get/update/delete use cases.

    Each public method ends in at most one commit, so its effect is applied
    entirely or not at all.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize the line service.

        Args:
            db: Database session
        """
        self.line_repository = LineRepository(db)
        self.station_service = StationService(db)

    async def create_line(self, request: CreateLineRequest) -> LineResponse:
        """
        Create a line with its first section.

        Args:
            request: Line name, color, terminal station ids and distance

        Returns:
            Projection of the persisted line

        Raises:
            HTTPException: 404 if either station is missing, 409 if the name is taken
        """
        with service_span("line.create", SERVICE_NAME, **{"line.name": request.name}) as span:
            line = request.to_line()
            up_station = await self.station_service.get_station(request.up_station_id)
            down_station = await self.station_service.get_station(request.down_station_id)

            if await self.line_repository.exists_by_name(request.name):
                raise self._name_conflict(request.name)

            line.add_section(Section(up_station=up_station, down_station=down_station, distance=request.distance))
            persisted = await self._save(line)

            span.set_attribute("line.id", persisted.id)
            logger.info(
                "line_created",
                line_id=persisted.id,
                name=persisted.name,
                up_station_id=up_station.id,
                down_station_id=down_station.id,
            )
            return LineResponse.of(persisted)

    async def find_all_lines(self) -> list[LineResponse]:
        """Project every persisted line, in id order."""
        with service_span("line.list", SERVICE_NAME) as span:
            lines = await self.line_repository.find_all()
            span.set_attribute("line.result_count", len(lines))
            return [LineResponse.of(line) for line in lines]

    async def get_line(self, line_id: int) -> LineResponse:
        """
        Get a single line.

        Raises:
            HTTPException: 404 if the line does not exist
        """
        with service_span("line.get", SERVICE_NAME, **{"line.id": line_id}):
            return LineResponse.of(await self._get_line_or_404(line_id))

    async def update_line(self, line_id: int, request: UpdateLineRequest) -> LineResponse:
        """
        Overwrite a line's name and color. Sections are untouched.

        Raises:
            HTTPException: 404 if the line does not exist, 409 if the new name belongs to another line
        """
        with service_span("line.update", SERVICE_NAME, **{"line.id": line_id}):
            line = await self._get_line_or_404(line_id)

            if await self.line_repository.exists_by_name(request.name, exclude_id=line_id):
                raise self._name_conflict(request.name)

            line.update(request.to_line())
            persisted = await self._save(line)

            logger.info("line_updated", line_id=line_id, name=persisted.name, color=persisted.color)
            return LineResponse.of(persisted)

    async def delete_line(self, line_id: int) -> None:
        """
        Permanently delete a line and its sections.

        Raises:
            HTTPException: 404 if the line does not exist
        """
        with service_span("line.delete", SERVICE_NAME, **{"line.id": line_id}):
            await self._get_line_or_404(line_id)
            await self.line_repository.delete_by_id(line_id)
            logger.info("line_deleted", line_id=line_id)

    async def _get_line_or_404(self, line_id: int) -> Line:
        if not (line := await self.line_repository.find_by_id(line_id)):
            logger.info("line_not_found", line_id=line_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=LINE_NOT_FOUND_MESSAGE,
            )
        return line

    async def _save(self, line: Line) -> Line:
        # A concurrent writer can still take the name between the check and the commit
        name = line.name
        try:
            return await self.line_repository.save(line)
        except IntegrityError as e:
            await self.line_repository.rollback()
            raise self._name_conflict(name) from e

    @staticmethod
    def _name_conflict(name: str) -> HTTPException:
        logger.info("line_name_conflict", name=name)
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Line name '{name}' already exists.",
        )
