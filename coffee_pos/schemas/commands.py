"""Tagged cart operations.

Each command names exactly one mutation of a session cart and
``CartStore.dispatch`` routes it to the matching method. The HTTP
surface accepts a narrower, id-based set (discriminated by ``kind``)
that the router resolves against the catalog before dispatching.
"""
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from .cart import DiscountType, ExtraShotSelection, ItemCustomization, SizeSelection
from .catalog import ProductSnapshot
from .promotions import Promotion

# raw cashier input, parsed by the store
RawNumber = Union[int, float, str, None]


class AddItemCommand(BaseModel):
    kind: Literal["add_item"] = "add_item"
    product: ProductSnapshot
    customization: Optional[ItemCustomization] = None


class RemoveItemCommand(BaseModel):
    kind: Literal["remove_item"] = "remove_item"
    cart_item_id: str


class UpdateQuantityCommand(BaseModel):
    kind: Literal["update_quantity"] = "update_quantity"
    cart_item_id: str
    quantity: RawNumber


class SetSizeCommand(BaseModel):
    kind: Literal["set_size"] = "set_size"
    cart_item_id: str
    size: Optional[SizeSelection] = None


class SetSugarCommand(BaseModel):
    kind: Literal["set_sugar"] = "set_sugar"
    cart_item_id: str
    sugar: Optional[str] = None
    sugar_id: Optional[int] = None


class SetIceCommand(BaseModel):
    kind: Literal["set_ice"] = "set_ice"
    cart_item_id: str
    ice: Optional[str] = None
    ice_id: Optional[int] = None


class ToggleExtraShotCommand(BaseModel):
    kind: Literal["toggle_extra_shot"] = "toggle_extra_shot"
    cart_item_id: str
    extra_shot: ExtraShotSelection


class RemoveExtraShotCommand(BaseModel):
    kind: Literal["remove_extra_shot"] = "remove_extra_shot"
    cart_item_id: str


class SetItemNoteCommand(BaseModel):
    kind: Literal["set_item_note"] = "set_item_note"
    cart_item_id: str
    note: Optional[str] = None


class SetDiscountCommand(BaseModel):
    kind: Literal["set_discount"] = "set_discount"
    type: DiscountType
    value: RawNumber


class RemoveDiscountCommand(BaseModel):
    kind: Literal["remove_discount"] = "remove_discount"


class SetNoteCommand(BaseModel):
    kind: Literal["set_note"] = "set_note"
    note: str


class RemoveNoteCommand(BaseModel):
    kind: Literal["remove_note"] = "remove_note"


class SetPromotionsCommand(BaseModel):
    kind: Literal["set_promotions"] = "set_promotions"
    promotions: Optional[List[Promotion]] = None


class ClearCartCommand(BaseModel):
    kind: Literal["clear"] = "clear"


CartCommand = Annotated[
    Union[
        AddItemCommand,
        RemoveItemCommand,
        UpdateQuantityCommand,
        SetSizeCommand,
        SetSugarCommand,
        SetIceCommand,
        ToggleExtraShotCommand,
        RemoveExtraShotCommand,
        SetItemNoteCommand,
        SetDiscountCommand,
        RemoveDiscountCommand,
        SetNoteCommand,
        RemoveNoteCommand,
        SetPromotionsCommand,
        ClearCartCommand,
    ],
    Field(discriminator="kind"),
]


# HTTP variants: options travel as catalog ids and are resolved against the
# line's product, so prices and modifiers always come from the catalog.
# Products and promotions enter only through /items and /promotions/sync.

class SelectSizeCommand(BaseModel):
    kind: Literal["set_size"] = "set_size"
    cart_item_id: str
    size_id: Optional[int]  # null clears the size


class SelectSugarCommand(BaseModel):
    kind: Literal["set_sugar"] = "set_sugar"
    cart_item_id: str
    sugar_id: Optional[int]


class SelectIceCommand(BaseModel):
    kind: Literal["set_ice"] = "set_ice"
    cart_item_id: str
    ice_id: Optional[int]


class SelectExtraShotCommand(BaseModel):
    kind: Literal["toggle_extra_shot"] = "toggle_extra_shot"
    cart_item_id: str
    extra_shot_id: int


HttpCartCommand = Annotated[
    Union[
        RemoveItemCommand,
        UpdateQuantityCommand,
        SelectSizeCommand,
        SelectSugarCommand,
        SelectIceCommand,
        SelectExtraShotCommand,
        RemoveExtraShotCommand,
        SetItemNoteCommand,
        SetDiscountCommand,
        RemoveDiscountCommand,
        SetNoteCommand,
        RemoveNoteCommand,
        ClearCartCommand,
    ],
    Field(discriminator="kind"),
]


class CartCommandRequest(BaseModel):
    command: HttpCartCommand
