"""Lines API endpoints."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.database import get_db
from subway.schemas.lines import CreateLineRequest, LineResponse, UpdateLineRequest
from subway.services.line_service import LineService

router = APIRouter(prefix="/lines", tags=["lines"])


@router.post("", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
async def create_line(
    request: CreateLineRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> LineResponse:
    """
    Create a line with its first section.

    Args:
        request: Line name, color, up/down station ids and distance
        response: Outgoing response (receives the Location header)
        db: Database session

    Returns:
        Created line

    Raises:
        HTTPException: 404 if a station is missing, 409 if the name is taken
    """
    line = await LineService(db).create_line(request)
    response.headers["Location"] = f"/lines/{line.id}"
    return line


@router.get("", response_model=list[LineResponse])
async def list_lines(db: AsyncSession = Depends(get_db)) -> list[LineResponse]:
    """List all lines."""
    return await LineService(db).find_all_lines()


@router.get("/{line_id}", response_model=LineResponse)
async def get_line(line_id: int, db: AsyncSession = Depends(get_db)) -> LineResponse:
    """
    Get a line by id.

    Raises:
        HTTPException: 404 if the line does not exist
    """
    return await LineService(db).get_line(line_id)


@router.put("/{line_id}", response_model=LineResponse)
async def update_line(
    line_id: int,
    request: UpdateLineRequest,
    db: AsyncSession = Depends(get_db),
) -> LineResponse:
    """
    Update a line's name and color.

    Raises:
        HTTPException: 404 if the line does not exist, 409 if the name is taken
    """
    return await LineService(db).update_line(line_id, request)


@router.delete("/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line(line_id: int, db: AsyncSession = Depends(get_db)) -> None:
    """
    Delete a line and its sections.

    Raises:
        HTTPException: 404 if the line does not exist
    """
    await LineService(db).delete_line(line_id)
