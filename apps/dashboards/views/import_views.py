from __future__ import annotations

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from dashboards.decorators import admin_required
from dashboards.forms import CsvUploadForm
from imports.csv_templates import available_templates, get_template, template_workbook
from imports.exceptions import InputError, TransactionFailure
from imports.schemas import SCHEMAS, get_schema
from imports.services import collect_stats, import_uploaded_csv


# ======================================================
# CSV TEMPLATES (DOWNLOAD)
# ======================================================

@require_GET
@admin_required()
def upload_template(request, entity_type):
    text = get_template(entity_type)
    if text is None:
        return JsonResponse(
            {"success": False, "message": "Invalid template type", "availableTypes": available_templates()},
            status=400,
        )

    if (request.GET.get("format") or "").lower() == "xlsx":
        resp = HttpResponse(
            template_workbook(entity_type),
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        resp["Content-Disposition"] = f'attachment; filename="{entity_type}_template.xlsx"'
        return resp

    resp = HttpResponse(text, content_type="text/csv")
    resp["Content-Disposition"] = f'attachment; filename="{entity_type}_template.csv"'
    return resp


# ======================================================
# CSV UPLOAD
# ======================================================

@csrf_exempt
@require_POST
@admin_required()
def upload_csv(request, entity_type):
    """
    Import one CSV file for the given entity type.

    Bad rows are skipped and reported (first IMPORT_ERROR_PREVIEW shown); the remaining rows
    are committed. The uploaded file is removed whatever happens.
    """
    if get_schema(entity_type) is None:
        return JsonResponse(
            {"success": False, "message": "Invalid upload type", "availableTypes": list(SCHEMAS)},
            status=400,
        )

    form = CsvUploadForm(request.POST, request.FILES)
    form.is_valid()
    upload = form.cleaned_data.get("csvFile")

    try:
        result = import_uploaded_csv(entity_type, upload, actor=getattr(request, "caller", None))
    except InputError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)
    except TransactionFailure as e:
        return JsonResponse({"success": False, "message": "Upload failed", "error": str(e)}, status=500)

    return JsonResponse(result.to_dict())


# ======================================================
# STATS
# ======================================================

@require_GET
@admin_required()
def upload_stats(request):
    return JsonResponse({"success": True, "stats": collect_stats()})
