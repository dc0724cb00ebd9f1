"""Tests for the stations API."""

import pytest
from fastapi import status
from httpx import AsyncClient
from subway.models.line import Line
from subway.models.station import Station

from tests.helpers.http_assertions import location_id


class TestStationsAPI:
    """Test cases for /stations endpoints."""

    @pytest.mark.asyncio
    async def test_create_station(self, async_client: AsyncClient) -> None:
        """Creating a station returns 201 and a Location header."""
        response = await async_client.post("/stations", json={"name": "강남역"})

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert response.headers["Location"] == f"/stations/{data['id']}"
        assert data["name"] == "강남역"
        assert set(data) == {"id", "name", "createdDate", "modifiedDate"}

    @pytest.mark.asyncio
    async def test_create_station_duplicate_name(self, async_client: AsyncClient) -> None:
        """Station names are unique."""
        await async_client.post("/stations", json={"name": "강남역"})

        response = await async_client.post("/stations", json={"name": "강남역"})

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_create_station_empty_name(self, async_client: AsyncClient) -> None:
        """Empty names fail validation."""
        response = await async_client.post("/stations", json={"name": ""})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_list_stations(self, async_client: AsyncClient) -> None:
        """Stations are listed in creation order."""
        first = await async_client.post("/stations", json={"name": "강남역"})
        second = await async_client.post("/stations", json={"name": "역삼역"})

        response = await async_client.get("/stations")

        assert response.status_code == status.HTTP_200_OK
        assert [station["id"] for station in response.json()] == [location_id(first), location_id(second)]

    @pytest.mark.asyncio
    async def test_delete_station(self, async_client: AsyncClient) -> None:
        """Unreferenced stations can be deleted."""
        created = await async_client.post("/stations", json={"name": "강남역"})

        response = await async_client.delete(created.headers["Location"])

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert (await async_client.get("/stations")).json() == []

    @pytest.mark.asyncio
    async def test_delete_missing_station(self, async_client: AsyncClient) -> None:
        """Unknown station ids are not-found errors."""
        response = await async_client.delete("/stations/42")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_station_used_by_line(
        self, async_client: AsyncClient, line_factory, up_station: Station
    ) -> None:
        """A station still referenced by a section can't be deleted."""
        line: Line = await line_factory("1호선")
        assert line.id is not None

        response = await async_client.delete(f"/stations/{up_station.id}")

        assert response.status_code == status.HTTP_409_CONFLICT
