from django.urls import path

from dashboards.views.batch_views import batch_analysis_view, generate_batches_view
from dashboards.views.import_views import upload_csv, upload_stats, upload_template

urlpatterns = [

    # ==================================================
    # TEMPLATES / STATS
    # ==================================================
    path("templates/<str:entity_type>", upload_template, name="upload_template"),
    path("stats", upload_stats, name="upload_stats"),

    # ==================================================
    # BATCH GENERATION
    # ==================================================
    path("generate-batches", generate_batches_view, name="generate_batches"),
    path(
        "batch-analysis/<str:academic_year>/<str:semester>",
        batch_analysis_view,
        name="batch_analysis",
    ),

    # ==================================================
    # CSV UPLOADS (one route per entity type)
    # ==================================================
    path("<str:entity_type>", upload_csv, name="upload_csv"),
]
