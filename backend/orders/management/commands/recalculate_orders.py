from django.core.management.base import BaseCommand

from orders.models import Order
from orders.services import OrderPricingError, OrderService
from orders.services.calculation_service import OrderCalculationService
from orders.statuses import status_info
from payments.money import quantize
from settings.config import app_settings


class Command(BaseCommand):
    help = "Re-price stored orders from their items and report grand totals that changed"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without saving",
        )
        parser.add_argument(
            "--ids",
            nargs="+",
            type=int,
            help="Only these order ids",
        )
        parser.add_argument(
            "--include-final",
            action="store_true",
            help="Also re-price completed and cancelled orders",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No changes will be made"))

        orders = Order.objects.prefetch_related("items").order_by("id")
        if options["ids"]:
            orders = orders.filter(id__in=options["ids"])

        checked = changed = failed = 0

        for order in orders:
            if status_info(order.status).is_final and not options["include_final"]:
                continue

            checked += 1
            previous = order.grand_total

            try:
                if dry_run:
                    result = OrderCalculationService.calculate(
                        order.line_requests(),
                        order.order_type,
                        order.manual_discount,
                        delivery_charge=order.delivery_charge if order.is_delivery else None,
                        specialty_item_shopping_fee=order.specialty_item_shopping_fee,
                        service_charge=order.service_charge,
                    )
                    new_total = quantize(app_settings.currency, result.grand_total)
                else:
                    new_total = OrderService.update_order(order, {}).grand_total
            except OrderPricingError as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f"Order {order.order_number}: {e}"))
                continue

            if new_total != previous:
                changed += 1
                self.stdout.write(f"Order {order.order_number}: {previous} -> {new_total}")

        verb = "Would update" if dry_run else "Updated"
        summary = f"{verb} {changed} of {checked} orders checked"
        if failed:
            summary += f", {failed} rejected by the calculator"
        self.stdout.write(self.style.SUCCESS(summary))
