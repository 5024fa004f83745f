"""Pydantic schemas for Resource domain."""

from typing import List, Optional

from pydantic import BaseModel

from app.core.timeutils import UtcDatetime


class ResourceInput(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class UserSummary(BaseModel):
    id: str
    username: str

    model_config = {"from_attributes": True}


class ResourceSummary(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class ResourceRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner: UserSummary
    reservation_count: int = 0

    model_config = {"from_attributes": True}


class UpcomingReservation(BaseModel):
    id: str
    start_time: UtcDatetime
    end_time: UtcDatetime
    reservee: UserSummary

    model_config = {"from_attributes": True}


class ResourceDetail(ResourceRead):
    reservations: List[UpcomingReservation] = []
