# pupuseria/urls.py — health/índice + todo lo que expone la app sales bajo /api/
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone

SERVICE_NAME = "Pupuseria Sales API"


def health(_request):
    return JsonResponse({"service": SERVICE_NAME, "status": "ok", "timestamp": timezone.now().isoformat()})


def index(_request):
    return JsonResponse({
        "message": "API Sistema de Ventas - Pupusería",
        "version": "1.0.0",
        "endpoints": {
            "products": "/api/products/",
            "orders": "/api/orders/",
            "reports": "/api/reports/",
            "open_days": "/api/open-days/",
            "health": "/api/health/",
        },
    })


urlpatterns = [
    path("admin/", admin.site.urls),

    path("", index, name="index"),
    path("api/health", health),
    path("api/health/", health, name="health"),

    path("api/", include("sales.urls")),
]
