# hotel_api/api/routers/rooms.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api.dependencies import require_role
from hotel_api.core.storage import save_uploads
from hotel_api.db.session import get_db
from hotel_api.db import crud_bookings, crud_rooms
from hotel_api.schemas.room import RoomOut

router = APIRouter()


def _parse_features(features: Optional[str]) -> Optional[List[str]]:
    # admin console sends "WiFi, TV, Minibar"
    if features is None:
        return None
    return [f.strip() for f in features.split(",") if f.strip()]


@router.get("")
async def list_rooms(db: AsyncSession = Depends(get_db)):
    rooms = await crud_rooms.list_rooms(db)
    return [RoomOut.model_validate(r) for r in rooms]


@router.get("/{room_id}")
async def get_room(room_id: int, db: AsyncSession = Depends(get_db)):
    room = await crud_rooms.get_room(db, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return RoomOut.model_validate(room)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_room(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_role("admin")),
    name: str = Form(...),
    price_per_night: float = Form(..., ge=0),
    description: str = Form(...),
    max_number_of_adults: int = Form(..., ge=1),
    features: str = Form(""),
    room_number: str = Form(""),
    is_available: bool = Form(True),
    images: Optional[List[UploadFile]] = File(None),
):
    """
    Create a room. At least one image is required; files are stored under
    STATIC_UPLOAD_DIR and referenced by URL.
    """
    urls = save_uploads(images)
    if not urls:
        raise HTTPException(status_code=400, detail="No images uploaded")

    room = await crud_rooms.create_room(
        db,
        name=name,
        price_per_night=price_per_night,
        description=description,
        max_number_of_adults=max_number_of_adults,
        features=_parse_features(features) or [],
        room_number=room_number,
        is_available=is_available,
        images=urls,
    )
    return RoomOut.model_validate(room)


@router.patch("/{room_id}")
async def update_room(
    room_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_role("admin")),
    name: Optional[str] = Form(None),
    price_per_night: Optional[float] = Form(None, ge=0),
    description: Optional[str] = Form(None),
    max_number_of_adults: Optional[int] = Form(None, ge=1),
    features: Optional[str] = Form(None),
    room_number: Optional[str] = Form(None),
    is_available: Optional[bool] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
):
    """
    Partial update. Newly uploaded images go in front of the existing ones.
    """
    room = await crud_rooms.get_room(db, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    new_urls = save_uploads(images)

    data = {
        "name": name,
        "price_per_night": price_per_night,
        "description": description,
        "max_number_of_adults": max_number_of_adults,
        "features": _parse_features(features),
        "room_number": room_number,
        "is_available": is_available,
        "images": new_urls + list(room.images or []) if new_urls else None,
    }

    room = await crud_rooms.update_room(db, room, data)
    return {"message": "Room updated successfully", "room": RoomOut.model_validate(room)}


@router.delete("/{room_id}")
async def delete_room(
    room_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_role("admin")),
):
    room = await crud_rooms.get_room(db, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    # bookings are never deleted; mark the room unavailable instead
    if await crud_bookings.count_bookings_for_room(db, room.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room has bookings and cannot be deleted",
        )
    await crud_rooms.delete_room(db, room)
    return {"message": "Room deleted successfully"}
