from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends

from coffee_pos.api.v1.deps import get_catalog
from coffee_pos.schemas.promotions import PromotionOut
from coffee_pos.services.catalog.repository import CatalogRepository
from coffee_pos.services.promo.display import promotion_label, promotion_status

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.get("", response_model=List[PromotionOut])
def list_promotions(active_only: bool = False, catalog: CatalogRepository = Depends(get_catalog)):
    now = datetime.now(timezone.utc)
    return [
        PromotionOut(**p.model_dump(), label=promotion_label(p), status=promotion_status(p, now))
        for p in catalog.list_promotions(active_only=active_only)
    ]
