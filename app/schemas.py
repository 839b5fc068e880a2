"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class ReadingRecord(BaseModel):
    """One stored reading as projected by the query endpoint."""

    room_id: Union[int, float, str] = Field(
        ..., description="As stored; the storage CHECK is the only range constraint."
    )
    temperature: float
    humidity: Optional[float] = None
    recorded_at: str = Field(..., description="UTC timestamp as 'YYYY-MM-DD HH:MM:SS'.")


class RoomRecord(BaseModel):
    id: int
    name: str


class AddReadingResponse(BaseModel):
    success: bool = True


class IngestionErrorResponse(BaseModel):
    error: str = "Invalid JSON or Database Error"


class ReadingsResponse(BaseModel):
    """Envelope returned by a successful reading query."""

    success: bool = True
    data: List[ReadingRecord] = Field(default_factory=list)


class QueryErrorResponse(BaseModel):
    success: bool = False
    error: str = "Database error"
    details: str
