# sales/urls.py — router DRF + reportes

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    OpenDayViewSet,
    OrderViewSet,
    ProductViewSet,
    daily_report,
    daily_report_export,
    sales_summary,
)

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"open-days", OpenDayViewSet, basename="open-day")


urlpatterns = [
    # Reportes
    path("reports/daily/<str:day>/", daily_report, name="report-daily"),
    path("reports/daily/<str:day>/export/", daily_report_export, name="report-daily-export"),
    path("reports/summary/", sales_summary, name="report-summary"),

    # Router por último
    path("", include(router.urls)),
]
