from __future__ import annotations

from django.urls import path

from . import views

app_name = "api"

urlpatterns = [
    path("overview/", views.overview, name="overview"),
    path("charts/<slug:chart>/", views.chart_data, name="chart"),
    path("groups/", views.group_data, name="groups"),
    path("listings.csv", views.download_filtered_csv, name="listings-csv"),
]
