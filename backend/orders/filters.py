import django_filters
from core_backend.base.filters import BaseFilterSet
from .models import Order
from .statuses import ACTIVE_STATUSES, HISTORY_STATUSES


class OrderFilter(BaseFilterSet):
    """
    Filters for the order list. created_after/created_before come from
    BaseFilterSet and accept plain dates as whole days.
    """

    SCOPES = {"active": ACTIVE_STATUSES, "history": HISTORY_STATUSES}

    customer = django_filters.NumberFilter(field_name="customer_id")
    delivery_date_from = django_filters.DateFilter(field_name="delivery_date", lookup_expr="gte")
    delivery_date_to = django_filters.DateFilter(field_name="delivery_date", lookup_expr="lte")
    scope = django_filters.ChoiceFilter(
        choices=[("active", "Active"), ("history", "History")], method="filter_scope"
    )

    class Meta:
        model = Order
        fields = ["status", "order_type", "payment_status", "payment_type"]

    def filter_scope(self, queryset, name, value):
        return queryset.filter(status__in=self.SCOPES[value])
