"""
Property routes, including the first-run setup wizard
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.schemas import PropertyCreate, PropertyUpdate, PropertyResponse, PropertySetupRequest
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.property_service import PropertyService

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("", response_model=List[PropertyResponse])
def list_properties(
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PROPERTY_READ))
):
    return PropertyService(db).get_properties()


@router.post("/setup", response_model=PropertyResponse)
def setup_property(
    data: PropertySetupRequest,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PROPERTY_WRITE))
):
    """Create a property together with its rooms"""
    try:
        return PropertyService(db).setup_property(data)
    except ValueError as e:
        raise http_error(e)


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PROPERTY_READ))
):
    prop = PropertyService(db).get_property(property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Properti tidak ditemukan")
    return prop


@router.post("", response_model=PropertyResponse)
def create_property(
    data: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PROPERTY_WRITE))
):
    return PropertyService(db).create_property(data)


@router.put("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    data: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PROPERTY_WRITE))
):
    try:
        return PropertyService(db).update_property(property_id, data)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{property_id}")
def delete_property(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.PROPERTY_WRITE))
):
    try:
        PropertyService(db).delete_property(property_id)
        return {"message": "Properti dihapus"}
    except ValueError as e:
        raise http_error(e)
