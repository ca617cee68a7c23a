"""
Core backend base components.

Foundational classes shared by the app viewsets, serializers and filters.
"""

from .viewsets import BaseViewSet
from .serializers import BaseModelSerializer, TimestampedSerializer
from .mixins import OptimizedQuerysetMixin, OwnerScopedQuerysetMixin
from .filters import BaseFilterSet

__all__ = [
    # ViewSets
    'BaseViewSet',

    # Serializers
    'BaseModelSerializer',
    'TimestampedSerializer',

    # Mixins
    'OptimizedQuerysetMixin',
    'OwnerScopedQuerysetMixin',

    # Filters
    'BaseFilterSet',
]
