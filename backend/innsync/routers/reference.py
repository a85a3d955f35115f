"""
Static reference data for forms
"""
from fastapi import APIRouter, HTTPException, status
from innsync import reference_data

router = APIRouter(prefix="/reference", tags=["Reference"])


@router.get("")
def get_reference_data():
    return {
        "cities": reference_data.INDONESIAN_CITIES,
        "provinces": reference_data.INDONESIAN_PROVINCES,
        "room_types": reference_data.ROOM_TYPES,
        "amenities": reference_data.AMENITIES,
        "payment_methods": reference_data.PAYMENT_METHODS,
        "holidays": reference_data.INDONESIAN_HOLIDAYS_2024,
    }


@router.get("/room-types/{type_id}")
def get_room_type(type_id: str):
    room_type = reference_data.get_room_type(type_id)
    if room_type is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tipe kamar tidak ditemukan")
    return room_type
