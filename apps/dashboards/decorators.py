from functools import wraps

from django.conf import settings
from django.http import JsonResponse


def _bearer_token(request) -> str:
    header = request.META.get("HTTP_AUTHORIZATION") or ""
    if not header.startswith("Bearer "):
        return ""
    return header.split(" ", 1)[1].strip()


def admin_required(*group_names: str):
    """Require an admin caller for the JSON upload/batch endpoints.

    Passes when the request carries `Authorization: Bearer <token>` with a
    token listed in settings.ADMIN_API_TOKENS, or when the logged-in user is a
    superuser or belongs to one of the given groups. The caller identity is
    stored on `request.caller`.
    """
    group_names = group_names or ("System Admin",)

    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            token = _bearer_token(request)
            if token and token in settings.ADMIN_API_TOKENS:
                request.caller = f"token:{token[:8]}"
                return view_func(request, *args, **kwargs)

            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                if user.is_superuser or user.groups.filter(name__in=group_names).exists():
                    request.caller = f"user:{user.get_username()}"
                    return view_func(request, *args, **kwargs)
                return JsonResponse({"success": False, "message": "Access denied. Admin only."}, status=401)

            if not token:
                return JsonResponse({"success": False, "message": "Access denied. No token provided."}, status=401)
            return JsonResponse({"success": False, "message": "Access denied. Admin only."}, status=401)

        return _wrapped

    return decorator
