"""
Backup service - JSON snapshot, validation and merge-restore of core data

Snapshots never contain password hashes, and identification numbers are
masked. A restore keeps the stored identification number of existing
guests and leaves it empty for new ones.
"""
import hashlib
import json
import logging
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import Date, DateTime, Numeric, Time
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Session

from innsync.models.hotel import Property, Room, Guest, Reservation, Payment
from innsync.services.query_cache import invalidate_dashboard
from innsync.utils.security import mask_value

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"

# Restore order follows foreign keys
TABLES = (
    ("properties", Property),
    ("rooms", Room),
    ("guests", Guest),
    ("reservations", Reservation),
    ("payments", Payment),
)
MASKED_FIELDS = {"guests": ("identification_number",)}
DROPPED_FIELDS = ("password_hash",)


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def _from_json(column, value: Any) -> Any:
    if value is None:
        return None
    column_type = column.type
    if isinstance(column_type, SQLEnum) and column_type.enum_class is not None:
        return column_type.enum_class(value)
    if isinstance(column_type, DateTime):
        return datetime.fromisoformat(value)
    if isinstance(column_type, Date):
        return date.fromisoformat(value)
    if isinstance(column_type, Time):
        return time.fromisoformat(value)
    if isinstance(column_type, Numeric):
        return Decimal(str(value))
    return value


def calculate_integrity(backup: Dict[str, Any]) -> str:
    """SHA-256 over the table data in canonical JSON form"""
    tables = {name: backup.get(name) for name, _ in TABLES}
    canonical = json.dumps(tables, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class BackupService:

    def __init__(self, db: Session):
        self.db = db

    def _serialize(self, table: str, row) -> dict:
        record = {}
        for column in row.__table__.columns:
            if column.name in DROPPED_FIELDS:
                continue
            value = getattr(row, column.name)
            if column.name in MASKED_FIELDS.get(table, ()) and value:
                value = mask_value(value)
            record[column.name] = _to_json(value)
        return record

    def _rows(self, table: str, model, property_id: Optional[int]) -> list:
        query = self.db.query(model)
        if property_id:
            if model is Property:
                query = query.filter(Property.id == property_id)
            elif model is Guest:
                query = query.filter(Guest.reservations.any(Reservation.property_id == property_id))
            elif model is Payment:
                query = query.join(Reservation).filter(Reservation.property_id == property_id)
            else:
                query = query.filter(model.property_id == property_id)
        return query.order_by(model.id).all()

    def create_backup(self, property_id: Optional[int] = None, reason: str = "manual",
                      exported_by: str = "system") -> dict:
        backup: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "version": BACKUP_VERSION,
        }
        for table, model in TABLES:
            backup[table] = [self._serialize(table, row) for row in self._rows(table, model, property_id)]

        backup["metadata"] = {
            "totalRecords": sum(len(backup[table]) for table, _ in TABLES),
            "dataIntegrity": calculate_integrity(backup),
            "exportedBy": exported_by,
            "exportReason": reason,
        }
        logger.info(f"Backup created: {backup['metadata']['totalRecords']} records, property={property_id}")
        return backup

    def validate_backup(self, backup: Dict[str, Any]) -> dict:
        errors: List[str] = []
        warnings: List[str] = []

        if backup.get("version") != BACKUP_VERSION:
            warnings.append(f"Versi backup ({backup.get('version')}) berbeda dengan versi saat ini ({BACKUP_VERSION})")
        if not backup.get("timestamp"):
            errors.append("Timestamp backup tidak ada")

        for table, _ in TABLES:
            if not isinstance(backup.get(table), list):
                errors.append(f"Data {table} tidak valid atau tidak ada")

        metadata = backup.get("metadata") or {}
        if metadata.get("dataIntegrity") != calculate_integrity(backup):
            errors.append("Pemeriksaan integritas data gagal - backup mungkin rusak")

        if isinstance(backup.get("properties"), list) and isinstance(backup.get("rooms"), list):
            property_ids = {p.get("id") for p in backup["properties"]}
            orphans = [r for r in backup["rooms"] if r.get("property_id") and r.get("property_id") not in property_ids]
            if orphans:
                warnings.append(f"{len(orphans)} kamar merujuk ke properti yang tidak ada")

        return {"is_valid": not errors, "errors": errors, "warnings": warnings}

    def restore_backup(self, backup: Dict[str, Any], dry_run: bool = False,
                       validate_integrity: bool = True) -> dict:
        """Merge backup rows into the database in dependency order"""
        if validate_integrity:
            validation = self.validate_backup(backup)
            if not validation["is_valid"]:
                return {"success": False, "restored_records": 0, "errors": validation["errors"]}
            for warning in validation["warnings"]:
                logger.warning(f"Backup validation warning: {warning}")

        restored = 0
        errors: List[str] = []
        for table, model in TABLES:
            records = backup.get(table) or []
            if dry_run:
                restored += len(records)
                continue

            columns = {c.name: c for c in model.__table__.columns}
            skipped = MASKED_FIELDS.get(table, ()) + DROPPED_FIELDS
            for record in records:
                try:
                    values = {
                        name: _from_json(columns[name], raw)
                        for name, raw in record.items()
                        if name in columns and name not in skipped
                    }
                except (ValueError, TypeError) as e:
                    errors.append(f"{table} #{record.get('id')}: {e}")
                    continue
                self.db.merge(model(**values))
                restored += 1
            self.db.flush()

        if dry_run:
            logger.info(f"Restore dry run: {restored} records would be restored")
        else:
            self.db.commit()
            invalidate_dashboard()
            logger.info(f"Restore finished: {restored} records, {len(errors)} errors")

        return {"success": not errors, "restored_records": restored, "errors": errors}
