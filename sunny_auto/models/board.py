from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

# Zero-padded formats; the board filters on exact date strings and sorts on time strings
ISO_DATE_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$"
HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class BoardStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class BoardEntryIn(BaseModel):
    """Payload for creating or replacing a board entry (the id comes from the URL or the board)."""
    customer_name: str = ""
    vehicle: str = ""
    service: str = ""
    date: str = Field(pattern=ISO_DATE_PATTERN)
    time: str = Field(pattern=HHMM_PATTERN)
    status: BoardStatus = BoardStatus.SCHEDULED
    phone: str = ""
    estimated_duration: str = ""
    notes: Optional[str] = None
    images: List[str] = Field(default_factory=list)


class BoardEntry(BoardEntryIn):
    id: int
