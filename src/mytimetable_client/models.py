from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MyTimetableModel(BaseModel):
    """
    Base for API records.
    Wire names are declared per field with ``alias``; the Python attribute
    name is accepted as well so callers can build records by hand.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Timetable(MyTimetableModel):
    # Unique identifier of the timetable
    id: str = Field(alias="value")
    # External identifier of the timetable
    key: Optional[str] = Field(default=None, alias="hostKey")
    description: Optional[str] = None


class TimetableFilterOption(MyTimetableModel):
    # Used as the value of the <attribute>Filter query parameter
    id: str = Field(alias="value")
    description: Optional[str] = None


class TimetableFilterType(MyTimetableModel):
    id: str = Field(alias="name")
    description: Optional[str] = None
    options: List[TimetableFilterOption] = Field(default_factory=list)

    def option(self, option_id: str) -> Optional[TimetableFilterOption]:
        return next((o for o in self.options if o.id == option_id), None)


class EventLocation(MyTimetableModel):
    description: Optional[str] = None
    uri: Optional[str] = None


class Event(MyTimetableModel):
    # Dates arrive as epoch milliseconds or ISO-8601 strings.
    activity_description: Optional[str] = Field(
        default=None, alias="activityDescription"
    )
    activity_type_description: Optional[str] = Field(
        default=None, alias="activityTypeDescription"
    )
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    locations: List[EventLocation] = Field(default_factory=list)
    notes: Optional[str] = None

    def location_text(self, unknown: Optional[str] = None) -> Optional[str]:
        descriptions = [loc.description for loc in self.locations if loc.description]
        if not descriptions:
            return unknown
        return ", ".join(descriptions)


__all__ = [
    "MyTimetableModel",
    "Timetable",
    "TimetableFilterOption",
    "TimetableFilterType",
    "EventLocation",
    "Event",
]
