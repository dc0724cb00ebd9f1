"""Pydantic schemas for line management."""

from datetime import datetime

from pydantic import Field, model_validator

from subway.models.line import Line
from subway.schemas.base import CamelModel
from subway.schemas.stations import StationResponse

# ==================== Request Schemas ====================


class UpdateLineRequest(CamelModel):
    """Request to update a line's metadata (name and color)."""

    name: str = Field(..., min_length=1, max_length=255, description="Line name (unique)")
    color: str = Field(..., min_length=1, max_length=20, description="Display color, e.g. #0000FF")

    def to_line(self) -> Line:
        """Build a transient Line carrying the requested metadata."""
        return Line(name=self.name, color=self.color)


class CreateLineRequest(UpdateLineRequest):
    """Request to create a line with its first section."""

    up_station_id: int = Field(..., description="Station at the up end of the first section")
    down_station_id: int = Field(..., description="Station at the down end of the first section")
    distance: int = Field(..., gt=0, description="Length of the first section")

    @model_validator(mode="after")
    def validate_distinct_stations(self) -> "CreateLineRequest":
        """A section can't start and end at the same station."""
        if self.up_station_id == self.down_station_id:
            msg = "upStationId and downStationId must be different stations"
            raise ValueError(msg)
        return self


# ==================== Response Schemas ====================


class LineResponse(CamelModel):
    """Line projection: metadata plus ordered stations. Derived on every read."""

    id: int
    name: str
    color: str
    stations: list[StationResponse]
    created_date: datetime
    modified_date: datetime

    @classmethod
    def of(cls, line: Line) -> "LineResponse":
        """Project a Line aggregate into its response shape."""
        return cls(
            id=line.id,
            name=line.name,
            color=line.color,
            stations=[StationResponse.of(station) for station in line.get_all_stations()],
            created_date=line.created_at,
            modified_date=line.updated_at,
        )
