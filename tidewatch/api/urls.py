"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from tidewatch.api.views import TidesCacheView, TidesView

urlpatterns = [
    path("tides", TidesView.as_view(), name="tides"),
    path("tides/cache", TidesCacheView.as_view(), name="tides-cache"),
]
