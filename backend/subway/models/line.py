"""Line aggregate: a named route and the sections it owns."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from subway.models.base import BaseModel
from subway.models.station import Station


class Line(BaseModel):
    """Subway line (e.g., 1호선). Aggregate root for its sections."""

    __tablename__ = "lines"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    color: Mapped[str] = mapped_column(
        String(20),  # Display color, e.g. "#0000FF" or "bg-red-600"
        nullable=False,
    )

    # Relationships
    sections: Mapped[list["Section"]] = relationship(
        back_populates="line",
        cascade="all, delete-orphan",
        order_by="Section.id",
        lazy="selectin",
    )

    def add_section(self, section: "Section") -> None:
        """Append a section to this line."""
        section.line = self
        if section not in self.sections:
            self.sections.append(section)

    def update(self, other: "Line") -> None:
        """Copy name and color from another line. Sections are left untouched."""
        self.name = other.name
        self.color = other.color

    def get_all_stations(self) -> list[Station]:
        """
        Ordered, distinct stations visited by this line.

        Walks the section chain from the terminal up-station (the one that is
        no section's down-station). Falls back to section insertion order when
        the sections don't form a single chain.

        Returns:
            Stations from the up terminal to the down terminal
        """
        if not self.sections:
            return []

        by_up_station = {_station_key(section.up_station): section for section in self.sections}
        down_keys = {_station_key(section.down_station) for section in self.sections}
        starts = [section for section in self.sections if _station_key(section.up_station) not in down_keys]

        if len(starts) == 1 and len(by_up_station) == len(self.sections):
            chain: list[Section] = []
            current: Section | None = starts[0]
            while current is not None and len(chain) < len(self.sections):
                chain.append(current)
                current = by_up_station.get(_station_key(current.down_station))
            if len(chain) == len(self.sections):
                return _distinct([chain[0].up_station, *(section.down_station for section in chain)])

        return _distinct([station for section in self.sections for station in section.stations])

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<Line(id={self.id}, name={self.name}, color={self.color})>"


class Section(BaseModel):
    """Segment of a line between an up-station and a down-station."""

    __tablename__ = "sections"

    line_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
    )
    up_station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    down_station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    distance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Relationships
    line: Mapped[Line] = relationship(back_populates="sections")
    up_station: Mapped[Station] = relationship(foreign_keys=[up_station_id], lazy="selectin")
    down_station: Mapped[Station] = relationship(foreign_keys=[down_station_id], lazy="selectin")

    __table_args__ = (
        CheckConstraint("distance > 0", name="ck_sections_distance_positive"),
        Index("ix_sections_line", "line_id"),
        Index("ix_sections_up_station", "up_station_id"),
        Index("ix_sections_down_station", "down_station_id"),
    )

    @property
    def stations(self) -> tuple[Station, Station]:
        """Up and down station, in travel order."""
        return self.up_station, self.down_station

    def __repr__(self) -> str:
        """String representation of the section."""
        return (
            f"<Section(id={self.id}, line_id={self.line_id}, "
            f"up={self.up_station_id}, down={self.down_station_id}, distance={self.distance})>"
        )


def _station_key(station: Station) -> int:
    # Transient stations have no id yet, identity stands in
    return station.id if station.id is not None else id(station)


def _distinct(stations: list[Station]) -> list[Station]:
    seen: set[int] = set()
    result = []
    for station in stations:
        if (key := _station_key(station)) not in seen:
            seen.add(key)
            result.append(station)
    return result
