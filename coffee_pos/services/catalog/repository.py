from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from coffee_pos import models
from coffee_pos.schemas.cart import ExtraShotSelection, SizeSelection
from coffee_pos.schemas.catalog import ProductOptions, ProductSnapshot
from coffee_pos.schemas.promotions import Promotion


class CatalogRepository:
    """read side of the product catalog, shaped into cart DTOs."""

    def __init__(self, db: Session):
        self.db = db

    def get_product_snapshot(self, product_id: int) -> Optional[ProductSnapshot]:
        product = self.db.get(models.Product, product_id)
        if not product or not product.is_active:
            return None
        return ProductSnapshot.model_validate(product)

    def get_size(self, product_id: int, size_id: int) -> Optional[SizeSelection]:
        size = (
            self.db.query(models.Size)
            .filter(models.Size.id == size_id, models.Size.product_id == product_id)
            .first()
        )
        if not size:
            return None
        return SizeSelection(id=size.id, name=size.size_name, price_modifier=size.price_modifier)

    def get_extra_shot(self, product_id: int, extra_shot_id: int) -> Optional[ExtraShotSelection]:
        shot = (
            self.db.query(models.ExtraShot)
            .filter(models.ExtraShot.id == extra_shot_id, models.ExtraShot.product_id == product_id)
            .first()
        )
        if not shot:
            return None
        return ExtraShotSelection(id=shot.id, name=shot.name, price_modifier=shot.price_modifier)

    def get_sugar(self, product_id: int, sugar_id: int) -> Optional[str]:
        sugar = (
            self.db.query(models.Sugar)
            .filter(models.Sugar.id == sugar_id, models.Sugar.product_id == product_id)
            .first()
        )
        return sugar.name if sugar else None

    def get_ice(self, product_id: int, ice_id: int) -> Optional[str]:
        ice = (
            self.db.query(models.Ice)
            .filter(models.Ice.id == ice_id, models.Ice.product_id == product_id)
            .first()
        )
        return ice.name if ice else None

    def get_product_options(self, product_ids: Iterable[int]) -> Dict[int, ProductOptions]:
        """option ids per product; missing or inactive products are left out."""
        requested = list(set(product_ids))
        if not requested:
            return {}

        ids = [
            pid for (pid,) in self.db.query(models.Product.id)
            .filter(models.Product.id.in_(requested), models.Product.is_active.is_(True))
            .all()
        ]
        options = {pid: ProductOptions(product_id=pid) for pid in ids}
        if not ids:
            return options

        size_rows = self.db.query(models.Size.product_id, models.Size.id).filter(models.Size.product_id.in_(ids)).all()
        for pid, size_id in size_rows:
            options[pid].size_ids.append(size_id)

        sugar_rows = self.db.query(models.Sugar.product_id, models.Sugar.id).filter(models.Sugar.product_id.in_(ids)).all()
        for pid, sugar_id in sugar_rows:
            options[pid].sugar_ids.append(sugar_id)

        return options

    def list_promotions(self, active_only: bool = False) -> List[Promotion]:
        q = self.db.query(models.Promotion)
        if active_only:
            q = q.filter(models.Promotion.is_active.is_(True))
        q = q.order_by(models.Promotion.id.asc())
        return [Promotion.model_validate(p) for p in q.all()]
