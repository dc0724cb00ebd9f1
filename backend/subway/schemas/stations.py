"""Pydantic schemas for stations."""

from datetime import datetime

from pydantic import Field

from subway.models.station import Station
from subway.schemas.base import CamelModel


class StationRequest(CamelModel):
    """Request to create a station."""

    name: str = Field(..., min_length=1, max_length=255, description="Station name (unique)")


class StationResponse(CamelModel):
    """Station as returned by the API."""

    id: int
    name: str
    created_date: datetime
    modified_date: datetime

    @classmethod
    def of(cls, station: Station) -> "StationResponse":
        """Project a Station row into its response shape."""
        return cls(
            id=station.id,
            name=station.name,
            created_date=station.created_at,
            modified_date=station.updated_at,
        )
