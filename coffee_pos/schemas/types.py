from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer

from coffee_pos.services.pricing.money import to_decimal

# NaN, blanks and garbage collapse to 0 before validation; JSON output is a plain number
Money = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]
