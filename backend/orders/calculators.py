"""
Order pricing calculator.

Turns the line items of an order request into per-line figures and the
order-level aggregate (subtotal, quantity, discounts, delivery charge, fees
and grand total).

This module is deliberately free of Django: it never touches the database,
never reads settings and keeps no state between calls, so the same input
always produces the same output. Business configuration (the delivery charge) and
the per-order fees are passed in through CalculationOptions by the caller.

Validation failures are returned, not raised:

    result = calculate(lines, CalculationOptions(is_delivery=True,
                                                 delivery_charge_amount=25))
    if isinstance(result, PricingError):
        return Response({"success": False, "message": result.message}, status=400)

Formula (per line):
    item_total  = price * quantity
    total_price = item_total + addons + variants - item_discount
    grand_price = total_price * quantity

Formula (order):
    total       = sum(item_total + addons + variants)   # item discounts NOT subtracted
    grand_total = total + tax + charges + delivery_charge
                  + specialty_item_shopping_fee + service_charge
                  - discount - manual_discount
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from payments.money import Number, to_decimal

MAX_AMOUNT = Decimal("999999999")
MAX_QUANTITY = Decimal("999999")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class DiscountType(str, Enum):
    AMOUNT = "amount"
    PERCENTAGE = "percentage"


class PricingErrorKind(str, Enum):
    VALUE_TOO_LARGE = "value_too_large"
    NEGATIVE_GRAND_TOTAL = "negative_grand_total"


@dataclass(frozen=True)
class PricingError:
    """A rejected calculation. No partial figures are ever attached."""

    kind: PricingErrorKind
    message: str

    def as_dict(self) -> Dict[str, str]:
        return {"code": self.kind.value, "message": self.message}


# --- Input ---


@dataclass(frozen=True)
class AddonRequest:
    price: Decimal
    quantity: Decimal
    id: Optional[int] = None
    name: Optional[str] = None

    @property
    def amount(self) -> Decimal:
        return self.price * self.quantity

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "quantity": str(self.quantity),
        }


@dataclass(frozen=True)
class VariantOptionRequest:
    price: Decimal
    id: Optional[int] = None
    name: Optional[str] = None
    variant_id: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "variant_id": self.variant_id,
        }


@dataclass(frozen=True)
class VariantRequest:
    options: Tuple[VariantOptionRequest, ...] = ()
    id: Optional[int] = None
    name: Optional[str] = None

    @property
    def amount(self) -> Decimal:
        # Option prices are flat: added once per line, whatever the quantity.
        return sum((option.price for option in self.options), ZERO)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "option": [option.as_dict() for option in self.options],
        }


@dataclass(frozen=True)
class OrderLineRequest:
    """One requested line item. name/description are passed through untouched."""

    price: Decimal
    quantity: Decimal
    discount: Optional[Decimal] = None
    discount_type: DiscountType = DiscountType.AMOUNT
    addons: Tuple[AddonRequest, ...] = ()
    variants: Tuple[VariantRequest, ...] = ()
    name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderLineRequest":
        """
        Build a line from a plain payload dict (camelCase or snake_case keys).

        Used for lines stored as JSON and for callers that skip the DRF
        serializers (management commands, tests).
        """
        discount = data.get("discount")
        discount_type = data.get("discount_type", data.get("discountType")) or DiscountType.AMOUNT
        return cls(
            price=to_decimal(data.get("price")),
            quantity=to_decimal(data.get("quantity")),
            discount=to_decimal(discount) if discount is not None else None,
            discount_type=DiscountType(discount_type),
            addons=tuple(
                AddonRequest(
                    price=to_decimal(addon.get("price")),
                    quantity=to_decimal(addon.get("quantity")),
                    id=addon.get("id"),
                    name=addon.get("name"),
                )
                for addon in data.get("addons") or ()
            ),
            variants=tuple(
                VariantRequest(
                    options=tuple(
                        VariantOptionRequest(
                            price=to_decimal(option.get("price")),
                            id=option.get("id"),
                            name=option.get("name"),
                            variant_id=option.get("variant_id", option.get("variantId")),
                        )
                        for option in variant.get("option") or ()
                    ),
                    id=variant.get("id"),
                    name=variant.get("name"),
                )
                for variant in data.get("variants") or ()
            ),
            name=data.get("name"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class CalculationOptions:
    is_delivery: bool = False
    delivery_charge_amount: Decimal = ZERO
    manual_discount: Decimal = ZERO
    specialty_item_shopping_fee: Decimal = ZERO
    service_charge: Decimal = ZERO


# --- Output ---


@dataclass(frozen=True)
class OrderLineComputed:
    """
    Figures for a single line. The optional amounts are None unless they are
    strictly positive, so zero addons/variants/discounts are simply absent.
    """

    line: OrderLineRequest
    total_price: Decimal
    grand_price: Decimal
    addons_amount: Optional[Decimal] = None
    variants_amount: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None

    def as_dict(self) -> Dict[str, Any]:
        line = self.line
        data: Dict[str, Any] = {
            "name": line.name,
            "description": line.description,
            "price": str(line.price),
            "quantity": str(line.quantity),
            "discount": str(line.discount) if line.discount is not None else None,
            "discount_type": line.discount_type.value,
            "addons": [addon.as_dict() for addon in line.addons],
            "variants": [variant.as_dict() for variant in line.variants],
            "total_price": str(self.total_price),
            "grand_price": str(self.grand_price),
        }
        if self.addons_amount is not None:
            data["addons_amount"] = str(self.addons_amount)
        if self.variants_amount is not None:
            data["variants_amount"] = str(self.variants_amount)
        if self.discount_amount is not None:
            data["discount_amount"] = str(self.discount_amount)
        return data


@dataclass(frozen=True)
class OrderCalculationResult:
    total: Decimal
    total_quantity: Decimal
    discount: Decimal
    total_tax: Decimal
    total_charges: Decimal
    delivery_charge: Decimal
    manual_discount: Decimal
    grand_total: Decimal
    lines: Tuple[OrderLineComputed, ...] = field(default_factory=tuple)
    specialty_item_shopping_fee: Decimal = ZERO
    service_charge: Decimal = ZERO

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total": str(self.total),
            "total_quantity": str(self.total_quantity),
            "discount": str(self.discount),
            "manual_discount": str(self.manual_discount),
            "total_tax": str(self.total_tax),
            "total_charges": str(self.total_charges),
            "delivery_charge": str(self.delivery_charge),
            "specialty_item_shopping_fee": str(self.specialty_item_shopping_fee),
            "service_charge": str(self.service_charge),
            "grand_total": str(self.grand_total),
            "order_items": [line.as_dict() for line in self.lines],
        }


CalculationOutcome = Union[OrderCalculationResult, PricingError]


def _positive_or_none(value: Decimal) -> Optional[Decimal]:
    return value if value > 0 else None


def line_discount(line: OrderLineRequest, item_total: Decimal) -> Decimal:
    """Resolve a line discount to a currency amount."""
    if not line.discount:
        return ZERO
    if line.discount_type == DiscountType.PERCENTAGE:
        return item_total * line.discount / HUNDRED
    return line.discount


def calculate(
    lines: Iterable[OrderLineRequest],
    options: Optional[CalculationOptions] = None,
) -> CalculationOutcome:
    """
    Price an order.

    Args:
        lines: Requested line items, processed in the given order
        options: Delivery flag, configured delivery charge, manual discount
            and the per-order fees

    Returns:
        OrderCalculationResult, or PricingError when a value exceeds its
        ceiling or the grand total would be negative.
    """
    options = options or CalculationOptions()

    total = ZERO
    total_quantity = ZERO
    discount = ZERO
    total_tax = ZERO
    total_charges = ZERO
    computed: List[OrderLineComputed] = []

    for line in lines:
        item_total = line.price * line.quantity
        item_discount = line_discount(line, item_total)
        addon_total = sum((addon.amount for addon in line.addons), ZERO)
        variant_total = sum((variant.amount for variant in line.variants), ZERO)

        if line.price > MAX_AMOUNT or line.quantity > MAX_QUANTITY:
            return PricingError(PricingErrorKind.VALUE_TOO_LARGE, "Price or quantity is too large")

        total_price = item_total + addon_total + variant_total - item_discount
        grand_price = total_price * line.quantity

        if total_price > MAX_AMOUNT or grand_price > MAX_AMOUNT:
            return PricingError(
                PricingErrorKind.VALUE_TOO_LARGE,
                "Calculated total exceeds maximum allowed value",
            )

        total += item_total + addon_total + variant_total
        total_quantity += line.quantity
        discount += item_discount

        computed.append(
            OrderLineComputed(
                line=line,
                total_price=total_price,
                grand_price=grand_price,
                addons_amount=_positive_or_none(addon_total),
                variants_amount=_positive_or_none(variant_total),
                discount_amount=_positive_or_none(item_discount),
            )
        )

    delivery_charge = to_decimal(options.delivery_charge_amount) if options.is_delivery else ZERO
    manual_discount = to_decimal(options.manual_discount)
    specialty_item_shopping_fee = to_decimal(options.specialty_item_shopping_fee)
    service_charge = to_decimal(options.service_charge)

    grand_total = (
        total
        + total_tax
        + total_charges
        + delivery_charge
        + specialty_item_shopping_fee
        + service_charge
        - discount
        - manual_discount
    )

    if grand_total < 0:
        return PricingError(
            PricingErrorKind.NEGATIVE_GRAND_TOTAL, "Grand total can't be less than zero"
        )

    return OrderCalculationResult(
        total=total,
        total_quantity=total_quantity,
        discount=discount,
        total_tax=total_tax,
        total_charges=total_charges,
        delivery_charge=delivery_charge,
        manual_discount=manual_discount,
        grand_total=grand_total,
        lines=tuple(computed),
        specialty_item_shopping_fee=specialty_item_shopping_fee,
        service_charge=service_charge,
    )


def build_options(
    is_delivery: bool,
    delivery_charge_amount: Number = ZERO,
    manual_discount: Optional[Number] = None,
    specialty_item_shopping_fee: Optional[Number] = None,
    service_charge: Optional[Number] = None,
) -> CalculationOptions:
    """Normalise loosely-typed option values into CalculationOptions."""
    return CalculationOptions(
        is_delivery=bool(is_delivery),
        delivery_charge_amount=to_decimal(delivery_charge_amount),
        manual_discount=to_decimal(manual_discount or 0),
        specialty_item_shopping_fee=to_decimal(specialty_item_shopping_fee or 0),
        service_charge=to_decimal(service_charge or 0),
    )
