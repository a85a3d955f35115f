"""
Backup and restore routes (admin and manager only)
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.schemas import BackupRestoreRequest
from innsync.security.auth import require_manager
from innsync.services.backup_service import BackupService

router = APIRouter(prefix="/backup", tags=["Backup"])


@router.get("")
def create_backup(
    property_id: Optional[int] = None,
    reason: str = "manual",
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_manager)
):
    return BackupService(db).create_backup(property_id, reason, exported_by=current_user.username)


@router.post("/validate")
def validate_backup(
    data: BackupRestoreRequest,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_manager)
):
    return BackupService(db).validate_backup(data.backup)


@router.post("/restore")
def restore_backup(
    data: BackupRestoreRequest,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_manager)
):
    """Merge a snapshot back in; `dry_run` only counts records"""
    return BackupService(db).restore_backup(data.backup, data.dry_run, data.validate_integrity)
