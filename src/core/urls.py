"""Root URL configuration for the Membership Access API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("auth/", include("authentication.urls")),
    path("", include("access_control.urls")),
    path("", include("members.urls")),
    path("", include("announcements.urls")),
]
