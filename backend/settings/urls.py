from django.urls import path
from .views import BusinessSetupViewSet

app_name = "settings"

business_setup = BusinessSetupViewSet.as_view({"get": "list", "patch": "partial_update"})

urlpatterns = [
    path("business/", business_setup, name="business-setup"),
]
