import django_filters
from django.db import models
from django.utils import timezone
from datetime import datetime, time
import logging

logger = logging.getLogger(__name__)


class FlexibleDateTimeFilter(django_filters.DateTimeFilter):
    """
    A DateTimeFilter that treats date-only inputs as whole days.

    "2025-11-11" parses to midnight. For 'lte'/'lt' lookups the value is moved
    to the end of that day so the range includes it; full datetimes such as
    "2025-11-11T10:30:00Z" are used exactly as given.
    """

    def filter(self, qs, value):
        if isinstance(value, datetime) and value.time() == time(0, 0, 0):
            if self.lookup_expr in ['lte', 'lt']:
                value = datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)
                if timezone.is_naive(value):
                    value = timezone.make_aware(value)
                logger.debug(f"FlexibleDateTimeFilter: Adjusted {self.field_name}__{self.lookup_expr} to end of day: {value}")

        return super().filter(qs, value)


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with common filtering patterns.

    Uses FlexibleDateTimeFilter for every DateTimeField, so date-only inputs
    work as full-day ranges.
    """

    # Common date range filters
    created_after = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_before = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    @classmethod
    def filter_for_field(cls, field, field_name, lookup_expr='exact'):
        if isinstance(field, models.DateTimeField):
            return FlexibleDateTimeFilter(field_name=field_name, lookup_expr=lookup_expr)
        return super().filter_for_field(field, field_name, lookup_expr)
