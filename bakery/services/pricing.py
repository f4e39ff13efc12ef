"""Size-dependent price resolution.

A product's displayed price is its effective base price (the offer price
while an offer with a non-zero price is active, otherwise the list price)
plus the additional price of the selected size. The functions here are
pure: they take a PricingContext snapshot and never touch the database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence, Tuple, Union

from bakery.services.errors import SelectionNotFoundError, ValidationError
from bakery.services.formatting import format_amount

Amount = Union[Decimal, int, float, str]
SizeId = Union[int, str]


def to_amount(value: Amount, field_name: str = "amount") -> Decimal:
    """Coerce a currency amount to a non-negative Decimal."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


@dataclass(frozen=True)
class SizeDefinition:
    id: SizeId
    name: str
    person_capacity: int
    additional_price: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if self.person_capacity is None or int(self.person_capacity) <= 0:
            raise ValidationError("person_capacity must be greater than 0")
        object.__setattr__(
            self, "additional_price", to_amount(self.additional_price, "additional_price")
        )

    @property
    def label(self) -> str:
        return f"{self.name} – {self.person_capacity} people"

    @classmethod
    def from_model(cls, size) -> "SizeDefinition":
        return cls(
            id=size.id,
            name=size.name,
            person_capacity=size.person_capacity,
            additional_price=size.additional_price if size.additional_price is not None else 0,
        )


@dataclass(frozen=True)
class ProductVariantOption:
    id: Optional[int]
    product_id: Optional[int]
    size_id: SizeId
    is_default: bool
    size: SizeDefinition
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, option) -> "ProductVariantOption":
        return cls(
            id=option.id,
            product_id=option.product_id,
            size_id=option.size_id,
            is_default=bool(option.is_default),
            size=SizeDefinition.from_model(option.size),
            created_at=option.created_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "size_id": self.size_id,
            "is_default": self.is_default,
            "label": self.size.label,
            "size": {
                "id": self.size.id,
                "name": self.size.name,
                "person_capacity": self.size.person_capacity,
                "additional_price": format_amount(self.size.additional_price),
            },
        }


@dataclass(frozen=True)
class PricingContext:
    base_price: Decimal
    is_on_offer: bool = False
    offer_price: Optional[Decimal] = None
    available_options: Tuple[ProductVariantOption, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_price", to_amount(self.base_price, "base_price"))
        if self.offer_price is not None:
            object.__setattr__(
                self, "offer_price", to_amount(self.offer_price, "offer_price")
            )
        object.__setattr__(self, "available_options", tuple(self.available_options))

    @property
    def effective_base_price(self) -> Decimal:
        if self.is_on_offer and self.offer_price:
            return self.offer_price
        return self.base_price

    @classmethod
    def from_product(
        cls, product, options: Sequence[ProductVariantOption] = ()
    ) -> "PricingContext":
        """Build a context from a Product row and its already ordered options."""
        return cls(
            base_price=product.price,
            is_on_offer=bool(product.is_offer),
            offer_price=product.offer_price,
            available_options=tuple(options),
        )


@dataclass(frozen=True)
class Selection:
    size_id: Optional[SizeId]
    total_price: Decimal


def _price_with(context: PricingContext, option: ProductVariantOption) -> Selection:
    return Selection(
        size_id=option.size_id,
        total_price=context.effective_base_price + option.size.additional_price,
    )


def resolve_initial_selection(context: PricingContext) -> Selection:
    """Pick the default size (or the first one when none is flagged)."""
    options = context.available_options
    if not options:
        return Selection(size_id=None, total_price=context.effective_base_price)

    selected = next((o for o in options if o.is_default), options[0])
    return _price_with(context, selected)


def select_size(context: PricingContext, size_id: SizeId) -> Selection:
    for option in context.available_options:
        if option.size_id == size_id:
            return _price_with(context, option)
    raise SelectionNotFoundError()
