"""
Per-staff preference routes
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.schemas import PreferenceValue, PreferenceResponse
from innsync.routers import http_error
from innsync.security.auth import get_current_user
from innsync.services.preference_service import PreferenceService

router = APIRouter(prefix="/preferences", tags=["Preferences"])


@router.get("", response_model=List[PreferenceResponse])
def list_preferences(
    db: Session = Depends(get_db),
    current_user: Staff = Depends(get_current_user)
):
    return PreferenceService(db).get_preferences(current_user.id)


@router.get("/{key}", response_model=PreferenceResponse)
def get_preference(
    key: str,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(get_current_user)
):
    try:
        preference = PreferenceService(db).get_preference(current_user.id, key)
    except ValueError as e:
        raise http_error(e)
    if preference is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preferensi belum disimpan")
    return preference


@router.put("/{key}", response_model=PreferenceResponse)
def set_preference(
    key: str,
    data: PreferenceValue,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(get_current_user)
):
    try:
        return PreferenceService(db).set_preference(current_user.id, key, data.value)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{key}")
def delete_preference(
    key: str,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(get_current_user)
):
    try:
        deleted = PreferenceService(db).delete_preference(current_user.id, key)
    except ValueError as e:
        raise http_error(e)
    return {"deleted": deleted}
