"""Pydantic schemas for Reservation domain."""

from typing import Optional

from pydantic import BaseModel

from app.core.timeutils import UtcDatetime
from app.domain.schemas.resource import ResourceSummary, UserSummary


class ReservationInput(BaseModel):
    # Kept as raw strings: parsing and interval checks belong to the scheduler
    resource_id: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class ReservationRead(BaseModel):
    id: str
    start_time: UtcDatetime
    end_time: UtcDatetime
    resource: ResourceSummary
    reservee: UserSummary

    model_config = {"from_attributes": True}
