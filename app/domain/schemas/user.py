"""Pydantic schemas for User domain and roles."""

from typing import List, Optional

from pydantic import BaseModel

from app.core.timeutils import UtcDatetime
from app.domain.schemas.resource import ResourceSummary


class UserRead(BaseModel):
    id: str
    username: str
    resource_count: int = 0
    reservation_count: int = 0


class OwnedResource(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    reservation_count: int = 0


class HeldReservation(BaseModel):
    id: str
    start_time: UtcDatetime
    end_time: UtcDatetime
    resource: ResourceSummary

    model_config = {"from_attributes": True}


class UserDetail(UserRead):
    resources: List[OwnedResource] = []
    reservations: List[HeldReservation] = []


class RoleUpdate(BaseModel):
    role: Optional[str] = None


class RoleRead(BaseModel):
    user_id: str
    role: str
