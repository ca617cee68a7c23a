from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.

    Subclasses can declare `select_related_fields` / `prefetch_related_fields`
    in their Meta; OptimizedQuerysetMixin applies them to the view queryset.
    """

    class Meta:
        # Default optimization fields (can be overridden)
        select_related_fields = []
        prefetch_related_fields = []

    def validate(self, data):
        """
        Base validation that can be extended by child classes.
        """
        return super().validate(data)


class TimestampedSerializer(BaseModelSerializer):
    """
    Base serializer for models with created_at/updated_at fields.
    """

    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    class Meta(BaseModelSerializer.Meta):
        abstract = True
