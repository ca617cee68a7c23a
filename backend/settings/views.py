from rest_framework import viewsets, status
from rest_framework.response import Response
from django.core.exceptions import ValidationError

from .serializers import BusinessSetupSerializer
from .permissions import SettingsReadOnlyOrStaff
from .services import SettingsService


class BusinessSetupViewSet(viewsets.GenericViewSet):
    """
    API endpoint for viewing and editing the single BusinessSetup object.
    """

    serializer_class = BusinessSetupSerializer
    permission_classes = [SettingsReadOnlyOrStaff]

    def get_object(self):
        """
        Always returns the single BusinessSetup instance.
        """
        return SettingsService.get_business_setup()

    def list(self, request, *args, **kwargs):
        """
        Since this is a singleton, the list view returns the one settings object.
        """
        serializer = self.get_serializer(self.get_object())
        return Response(serializer.data)

    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            instance = SettingsService.update_business_setup(serializer.validated_data)
        except ValidationError as e:
            return Response(
                {"success": False, "messages": e.message_dict},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(self.get_serializer(instance).data)
