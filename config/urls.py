"""
URL configuration for config project.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # CSV import + batch generation API (admin only)
    path("api/upload/", include("dashboards.urls")),

    # Admin
    path("admin/", admin.site.urls),
]
