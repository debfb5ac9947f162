# backend/hotel_api/schemas/room.py
from datetime import datetime
from typing import List

from pydantic import BaseModel


class RoomBase(BaseModel):
    id: int
    name: str
    price_per_night: float
    images: List[str]
    features: List[str]
    description: str
    max_number_of_adults: int
    room_number: str
    is_available: bool

    model_config = {"from_attributes": True}


class RoomOut(RoomBase):
    created_at: datetime
    updated_at: datetime
