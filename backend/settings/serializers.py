from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from .models import BusinessSetup


class BusinessSetupSerializer(BaseModelSerializer):
    delivery_charge = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0
    )

    class Meta:
        model = BusinessSetup
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "notification_email",
            "currency",
            "delivery_charge",
            "order_number_prefix",
            "updated_at",
        ]
        read_only_fields = ["id", "updated_at"]

    def validate_currency(self, value):
        if len(value) != 3 or not value.isalpha():
            raise serializers.ValidationError("Currency must be a three-letter ISO 4217 code.")
        return value.upper()
