"""Attended-show log models"""
from datetime import date, datetime
from typing import Optional, Union
from pydantic import BaseModel, Field


class EventLogEntry(BaseModel):
    """One attended show, joined with its event, venue and artist"""
    log_id: str
    event_id: str
    event_date: Union[datetime, date]
    artist_id: str
    artist_genres: list[str] = Field(default_factory=list)
    venue_id: str
    venue_city: str
    venue_state: Optional[str] = None
    venue_country: Optional[str] = None
