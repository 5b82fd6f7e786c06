from __future__ import annotations

import json

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from cohorts.analysis import analyze_batches
from cohorts.services import generate_batches
from dashboards.decorators import admin_required
from dashboards.forms import BatchRunForm
from imports.exceptions import InputError, TransactionFailure


def _request_data(request) -> dict:
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    return request.POST


@csrf_exempt
@require_POST
@admin_required()
def generate_batches_view(request):
    form = BatchRunForm(_request_data(request))
    if not form.is_valid():
        return JsonResponse({"success": False, "message": form.first_error()}, status=400)

    try:
        run = generate_batches(form.cleaned_data["academicYear"], form.cleaned_data["semester"])
    except InputError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)
    except TransactionFailure as e:
        return JsonResponse({"success": False, "message": "Batch generation failed", "error": str(e)}, status=500)

    return JsonResponse(run.to_dict())


@require_GET
@admin_required()
def batch_analysis_view(request, academic_year, semester):
    try:
        analysis = analyze_batches(academic_year, semester)
    except InputError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)

    return JsonResponse(analysis)
