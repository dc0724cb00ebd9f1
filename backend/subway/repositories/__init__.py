"""Persistence repositories."""

from subway.repositories.line_repository import LineRepository

__all__ = ["LineRepository"]
