"""HTTP response helpers for API tests."""

from httpx import Response


def location_id(response: Response) -> int:
    """Extract the numeric id from a ``Location: /<resource>/{id}`` header."""
    return int(response.headers["Location"].split("/")[2])


def station_ids(line_json: dict) -> list[int]:
    """Ordered station ids of a LineResponse body."""
    return [station["id"] for station in line_json["stations"]]
