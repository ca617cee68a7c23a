from rest_framework import permissions


class OrderAccessPermission(permissions.BasePermission):
    """
    - Authenticated users may price orders, create their own and read their own
    - Staff users may do everything, including edits, deletes and bulk changes
    """

    STAFF_ACTIONS = {"update", "partial_update", "destroy", "duplicate", "bulk_update", "bulk_delete"}

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if view.action in self.STAFF_ACTIONS:
            return request.user.is_staff
        return True

    def has_object_permission(self, request, view, obj):
        if request.user.is_staff:
            return True

        # OrderItem rows are checked through their order
        order = obj.order if hasattr(obj, "order") else obj
        return order.customer_id == request.user.id
