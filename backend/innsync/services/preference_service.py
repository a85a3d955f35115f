"""
Preference service - small per-staff UI settings
"""
from typing import Any, List, Optional
from sqlalchemy.orm import Session
from innsync.models.system import UserPreference

ALLOWED_KEYS = ("selected_property_id", "sidebar_collapsed", "performance_metrics")


class PreferenceService:

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in ALLOWED_KEYS:
            raise ValueError(f"Preferensi tidak dikenal: {key}")

    def get_preferences(self, staff_id: int) -> List[UserPreference]:
        return self.db.query(UserPreference).filter(
            UserPreference.staff_id == staff_id
        ).order_by(UserPreference.key).all()

    def get_preference(self, staff_id: int, key: str) -> Optional[UserPreference]:
        self._check_key(key)
        return self.db.query(UserPreference).filter(
            UserPreference.staff_id == staff_id,
            UserPreference.key == key
        ).first()

    def set_preference(self, staff_id: int, key: str, value: Any) -> UserPreference:
        preference = self.get_preference(staff_id, key)
        if preference is None:
            preference = UserPreference(staff_id=staff_id, key=key)
            self.db.add(preference)
        preference.value = value
        self.db.commit()
        self.db.refresh(preference)
        return preference

    def delete_preference(self, staff_id: int, key: str) -> bool:
        preference = self.get_preference(staff_id, key)
        if preference is None:
            return False
        self.db.delete(preference)
        self.db.commit()
        return True
