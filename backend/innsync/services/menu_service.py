"""
Menu service - restaurant categories and items
"""
import logging
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from innsync.models.restaurant import RestaurantCategory, RestaurantItem, DietaryType
from innsync.models.schemas import CategoryCreate, CategoryUpdate, MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)

DIETARY_VALUES = {d.value for d in DietaryType}


class MenuService:

    def __init__(self, db: Session):
        self.db = db

    # ---------- categories ----------

    def get_categories(self, property_id: Optional[int] = None,
                       active_only: bool = False) -> List[RestaurantCategory]:
        query = self.db.query(RestaurantCategory)
        if property_id:
            query = query.filter(RestaurantCategory.property_id == property_id)
        if active_only:
            query = query.filter(RestaurantCategory.is_active == True)  # noqa: E712
        return query.order_by(RestaurantCategory.display_order, RestaurantCategory.name).all()

    def get_category(self, category_id: int) -> Optional[RestaurantCategory]:
        return self.db.query(RestaurantCategory).filter(RestaurantCategory.id == category_id).first()

    def create_category(self, data: CategoryCreate) -> RestaurantCategory:
        category = RestaurantCategory(**data.model_dump())
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def update_category(self, category_id: int, data: CategoryUpdate) -> RestaurantCategory:
        category = self.get_category(category_id)
        if not category:
            raise ValueError("Kategori tidak ditemukan")
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(category, key, value)
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category_id: int) -> bool:
        category = self.get_category(category_id)
        if not category:
            raise ValueError("Kategori tidak ditemukan")
        if category.items:
            raise ValueError("Kategori masih memiliki menu")
        self.db.delete(category)
        self.db.commit()
        return True

    def reorder_categories(self, category_ids: List[int]) -> List[RestaurantCategory]:
        """Assign display_order following the given id order"""
        categories = {
            c.id: c for c in self.db.query(RestaurantCategory).filter(
                RestaurantCategory.id.in_(category_ids)
            ).all()
        }
        missing = [cid for cid in category_ids if cid not in categories]
        if missing:
            raise ValueError(f"Kategori tidak ditemukan: {missing}")

        for position, category_id in enumerate(category_ids):
            categories[category_id].display_order = position
        self.db.commit()
        return [categories[cid] for cid in category_ids]

    # ---------- items ----------

    def get_items(self, property_id: Optional[int] = None, category_id: Optional[int] = None,
                  available_only: bool = False, dietary: Optional[DietaryType] = None,
                  search: Optional[str] = None) -> List[RestaurantItem]:
        query = self.db.query(RestaurantItem).join(RestaurantCategory)
        if property_id:
            query = query.filter(RestaurantCategory.property_id == property_id)
        if category_id:
            query = query.filter(RestaurantItem.category_id == category_id)
        if available_only:
            query = query.filter(RestaurantItem.is_available == True)  # noqa: E712
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(RestaurantItem.name.ilike(pattern), RestaurantItem.description.ilike(pattern)))

        items = query.order_by(RestaurantCategory.display_order, RestaurantItem.name).all()
        if dietary:
            items = [i for i in items if dietary.value in (i.dietary_info or [])]
        return items

    def get_item(self, item_id: int) -> Optional[RestaurantItem]:
        return self.db.query(RestaurantItem).filter(RestaurantItem.id == item_id).first()

    def _check_dietary(self, values: Optional[List[str]]) -> None:
        unknown = [v for v in values or [] if v not in DIETARY_VALUES]
        if unknown:
            raise ValueError(f"Info diet tidak dikenal: {', '.join(unknown)}")

    def create_item(self, data: MenuItemCreate) -> RestaurantItem:
        if not self.get_category(data.category_id):
            raise ValueError("Kategori tidak ditemukan")
        self._check_dietary(data.dietary_info)

        item = RestaurantItem(**data.model_dump())
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_item(self, item_id: int, data: MenuItemUpdate) -> RestaurantItem:
        item = self.get_item(item_id)
        if not item:
            raise ValueError("Menu tidak ditemukan")

        update_data = data.model_dump(exclude_unset=True)
        if "category_id" in update_data and not self.get_category(update_data["category_id"]):
            raise ValueError("Kategori tidak ditemukan")
        self._check_dietary(update_data.get("dietary_info"))

        for key, value in update_data.items():
            setattr(item, key, value)
        self.db.commit()
        self.db.refresh(item)
        return item

    def toggle_availability(self, item_id: int) -> RestaurantItem:
        item = self.get_item(item_id)
        if not item:
            raise ValueError("Menu tidak ditemukan")
        item.is_available = not item.is_available
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Menu item {item.name} available={item.is_available}")
        return item

    def delete_item(self, item_id: int) -> bool:
        item = self.get_item(item_id)
        if not item:
            raise ValueError("Menu tidak ditemukan")
        self.db.delete(item)
        self.db.commit()
        return True
