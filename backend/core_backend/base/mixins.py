from rest_framework.viewsets import ViewSetMixin
from django.db.models import Prefetch


class OptimizedQuerysetMixin(ViewSetMixin):
    """
    A ViewSet mixin that optimizes the queryset from the
    `select_related_fields` and `prefetch_related_fields` attributes declared
    in the Meta class of the current action's serializer.
    """

    def _get_optimizations(self, serializer_class):
        select_related = set()
        prefetch_related = set()

        meta = getattr(serializer_class, "Meta", None)
        if meta is None:
            return select_related, prefetch_related

        select_related.update(getattr(meta, "select_related_fields", []))
        for field in getattr(meta, "prefetch_related_fields", []):
            # Prefetch objects are kept as-is
            prefetch_related.add(field if isinstance(field, Prefetch) else str(field))

        return select_related, prefetch_related

    def get_queryset(self):
        queryset = super().get_queryset()

        try:
            serializer_class = self.get_serializer_class()
        except (AttributeError, AssertionError):
            return queryset

        select_related, prefetch_related = self._get_optimizations(serializer_class)

        if select_related:
            queryset = queryset.select_related(*select_related)

        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset


class OwnerScopedQuerysetMixin:
    """
    Limits the queryset to records owned by the requesting user.

    Staff users see everything. Anyone else only sees rows whose
    `owner_field` points at them.

    Usage:
        class OrderViewSet(OwnerScopedQuerysetMixin, BaseViewSet):
            owner_field = "customer"
    """

    owner_field = "user"

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user

        if user.is_staff or user.is_superuser:
            return qs

        if not user.is_authenticated:
            return qs.none()

        return qs.filter(**{self.owner_field: user})
