"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True)
class NewReading:
    """A validated reading ready to be inserted; the store assigns ``recorded_at``."""

    room_id: Any
    temperature: float
    humidity: Optional[float] = None


@dataclass(slots=True)
class ReadingFilter:
    """Optional filters of a reading query, exactly as received."""

    room_id: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
