from decimal import Decimal
from typing import Iterable, List, Optional, Union
import logging

from orders.calculators import (
    OrderCalculationResult,
    OrderLineComputed,
    OrderLineRequest,
    PricingError,
    PricingErrorKind,
    build_options,
    calculate,
)
from orders.exceptions import OrderPricingError
from orders.models import MONEY_LIMIT, QUANTITY_LIMIT, Order, OrderItem
from orders.statuses import OrderType
from payments.money import quantize
from settings.config import app_settings

logger = logging.getLogger(__name__)


class OrderCalculationService:
    """Service for pricing orders and copying the figures onto Order/OrderItem rows."""

    @staticmethod
    def calculate(
        lines: Iterable[OrderLineRequest],
        order_type: str,
        manual_discount=None,
        delivery_charge=None,
        specialty_item_shopping_fee=None,
        service_charge=None,
    ) -> OrderCalculationResult:
        """
        Price a set of lines with the configured delivery charge.

        Args:
            lines: Calculator input, one entry per order line
            order_type: dine_in, delivery or pickup
            manual_discount: Order-level discount amount
            delivery_charge: Overrides the configured charge (used to keep the
                charge an existing delivery order was priced with)
            specialty_item_shopping_fee: Flat fee for sourcing specialty items
            service_charge: Flat service fee

        Raises:
            OrderPricingError: If the calculator rejects the input or a figure
                does not fit the order columns
        """
        if delivery_charge is None:
            delivery_charge = app_settings.get_financial_settings()["delivery_charge"]

        options = build_options(
            is_delivery=order_type == OrderType.DELIVERY,
            delivery_charge_amount=delivery_charge,
            manual_discount=manual_discount,
            specialty_item_shopping_fee=specialty_item_shopping_fee,
            service_charge=service_charge,
        )
        outcome = calculate(list(lines), options)
        if isinstance(outcome, OrderCalculationResult):
            outcome = OrderCalculationService.check_storable(outcome)

        if isinstance(outcome, PricingError):
            logger.info(f"Order calculation rejected ({outcome.kind.value}): {outcome.message}")
            raise OrderPricingError(outcome)
        return outcome

    @staticmethod
    def check_storable(result: OrderCalculationResult) -> Union[OrderCalculationResult, PricingError]:
        """
        The calculator only caps per-line figures. Order-level sums can still
        outgrow the columns (one line at the price and quantity ceilings with a
        full discount sums to 15 digits), so every figure about to be stored is
        checked after rounding.
        """
        currency = app_settings.currency

        amounts = [
            result.total,
            result.discount,
            result.manual_discount,
            result.delivery_charge,
            result.specialty_item_shopping_fee,
            result.service_charge,
            result.grand_total,
        ]
        for computed in result.lines:
            amounts.extend(
                amount
                for amount in (
                    computed.line.price,
                    computed.addons_amount,
                    computed.variants_amount,
                    computed.discount_amount,
                    computed.total_price,
                    computed.grand_price,
                )
                if amount is not None
            )

        too_large = result.total_quantity >= QUANTITY_LIMIT or any(
            abs(quantize(currency, amount)) >= MONEY_LIMIT for amount in amounts
        )
        if too_large:
            return PricingError(
                PricingErrorKind.VALUE_TOO_LARGE,
                "Calculated total exceeds maximum allowed value",
            )
        return result

    @staticmethod
    def apply_totals(order: Order, result: OrderCalculationResult) -> None:
        """Copy the aggregate figures onto the order, rounded to the currency."""
        currency = app_settings.currency

        order.total = quantize(currency, result.total)
        order.total_quantity = result.total_quantity.quantize(Decimal("0.01"))
        order.discount = quantize(currency, result.discount)
        order.manual_discount = quantize(currency, result.manual_discount)
        order.total_tax = quantize(currency, result.total_tax)
        order.total_charges = quantize(currency, result.total_charges)
        order.delivery_charge = quantize(currency, result.delivery_charge)
        order.specialty_item_shopping_fee = quantize(currency, result.specialty_item_shopping_fee)
        order.service_charge = quantize(currency, result.service_charge)
        order.grand_total = quantize(currency, result.grand_total)

    @staticmethod
    def build_item(order: Order, computed: OrderLineComputed, position: int) -> OrderItem:
        currency = app_settings.currency
        line = computed.line

        def optional(amount: Optional[Decimal]) -> Optional[Decimal]:
            return quantize(currency, amount) if amount is not None else None

        return OrderItem(
            order=order,
            name=line.name,
            description=line.description,
            price=quantize(currency, line.price),
            quantity=line.quantity,
            discount=line.discount,
            discount_type=line.discount_type.value,
            addons=[addon.as_dict() for addon in line.addons],
            variants=[variant.as_dict() for variant in line.variants],
            addons_amount=optional(computed.addons_amount),
            variants_amount=optional(computed.variants_amount),
            discount_amount=optional(computed.discount_amount),
            total_price=quantize(currency, computed.total_price),
            grand_price=quantize(currency, computed.grand_price),
            position=position,
        )

    @staticmethod
    def replace_items(order: Order, result: OrderCalculationResult) -> List[OrderItem]:
        """Drop the order's items and store one row per computed line."""
        order.items.all().delete()
        items = [
            OrderCalculationService.build_item(order, computed, position)
            for position, computed in enumerate(result.lines)
        ]
        return OrderItem.objects.bulk_create(items)

    @staticmethod
    def refresh_items(order: Order, result: OrderCalculationResult) -> None:
        """
        Write recomputed line figures back onto the stored items. Lines come
        from order.line_requests(), so the stored rows are in the same order.
        """
        currency = app_settings.currency
        items = list(order.items.all())
        for item, computed in zip(items, result.lines):
            item.total_price = quantize(currency, computed.total_price)
            item.grand_price = quantize(currency, computed.grand_price)
            item.addons_amount = (
                quantize(currency, computed.addons_amount) if computed.addons_amount is not None else None
            )
            item.variants_amount = (
                quantize(currency, computed.variants_amount) if computed.variants_amount is not None else None
            )
            item.discount_amount = (
                quantize(currency, computed.discount_amount) if computed.discount_amount is not None else None
            )
        OrderItem.objects.bulk_update(
            items,
            ["total_price", "grand_price", "addons_amount", "variants_amount", "discount_amount"],
        )
