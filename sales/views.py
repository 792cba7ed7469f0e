# sales/views.py — ViewSets (productos, pedidos, días) + endpoints de reportes

import logging
from datetime import date

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import filters, status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ParseError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from . import reports, services
from .models import OpenDay, Order, Product
from .serializers import (
    DailyReportSerializer,
    OpenDaySerializer,
    OrderReadSerializer,
    OrderWriteSerializer,
    ProductSerializer,
    SalesSummarySerializer,
)

logger = logging.getLogger(__name__)

DATE_REGEX = r"\d{4}-\d{2}-\d{2}"


def _parse_date(raw, field="date"):
    """'YYYY-MM-DD' -> date; None si viene vacío; 400 si es inválido."""
    if raw in (None, ""):
        return None
    try:
        return date.fromisoformat(str(raw))
    except ValueError:
        raise ParseError(f"Formato de fecha inválido en '{field}' (usar YYYY-MM-DD).")


# -------------------------------------------------
# Productos (CRUD)
# -------------------------------------------------
class ProductViewSet(viewsets.ModelViewSet):
    permission_classes = [AllowAny]
    serializer_class = ProductSerializer
    queryset = Product.objects.all().order_by("name")
    pagination_class = None

    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["name"]
    ordering_fields = ["id", "name", "unit_price", "created_at"]

    def perform_destroy(self, instance):
        # PROTECT: si está en pedidos levanta ProtectedError -> 400 (sales.exceptions)
        pk = instance.pk
        instance.delete()
        logger.info("Producto #%s eliminado", pk)


# -------------------------------------------------
# Pedidos — lectura y escritura separadas
# -------------------------------------------------
class OrderViewSet(viewsets.ModelViewSet):
    permission_classes = [AllowAny]
    queryset = Order.objects.all().prefetch_related("items__product").order_by("-created_at", "-id")
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def get_serializer_class(self):
        if self.request.method in ("GET", "HEAD"):
            return OrderReadSerializer
        return OrderWriteSerializer

    def list(self, request, *args, **kwargs):
        """Pedidos de un día de venta (?date=YYYY-MM-DD, por defecto hoy)."""
        day = _parse_date(request.query_params.get("date")) or timezone.localdate()
        qs = self.get_queryset().filter(business_day=day)
        data = OrderReadSerializer(qs, many=True, context={"request": request}).data
        return Response({"date": day, "count": len(data), "results": data})

    def create(self, request, *args, **kwargs):
        ser = OrderWriteSerializer(data=request.data, context={"request": request})
        if not ser.is_valid():
            logger.warning("Pedido rechazado: %s", ser.errors)
            return Response(ser.errors, status=status.HTTP_400_BAD_REQUEST)
        order = ser.save()
        read = OrderReadSerializer(order, context={"request": request})
        return Response(read.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        ser = OrderWriteSerializer(instance, data=request.data, context={"request": request})
        if not ser.is_valid():
            logger.warning("Actualización de pedido #%s rechazada: %s", instance.pk, ser.errors)
            return Response(ser.errors, status=status.HTTP_400_BAD_REQUEST)
        order = ser.save()
        return Response(OrderReadSerializer(order, context={"request": request}).data)

    def destroy(self, request, *args, **kwargs):
        obj = self.get_object()
        services.delete_order(obj.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# -------------------------------------------------
# Días abiertos/cerrados (sin registro = abierto)
# -------------------------------------------------
class OpenDayViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]
    lookup_field = "day"
    lookup_value_regex = DATE_REGEX

    def list(self, request):
        qs = OpenDay.objects.all().order_by("-date")
        start = _parse_date(request.query_params.get("start_date"), "start_date")
        end = _parse_date(request.query_params.get("end_date"), "end_date")
        if start:
            qs = qs.filter(date__gte=start)
        if end:
            qs = qs.filter(date__lte=end)
        data = OpenDaySerializer(qs, many=True).data
        return Response({"count": len(data), "results": data})

    def retrieve(self, request, day=None):
        day = _parse_date(day)
        record = OpenDay.objects.filter(date=day).first()
        if record is None:
            return Response({"date": day, "is_open": True, "note": "Sin registro, asumido como abierto"})
        return Response(OpenDaySerializer(record).data)

    def update(self, request, day=None):
        day = _parse_date(day)
        is_open = request.data.get("is_open")
        if not isinstance(is_open, bool):
            return Response({"is_open": "Debe ser true o false."}, status=status.HTTP_400_BAD_REQUEST)

        record, created = OpenDay.objects.update_or_create(date=day, defaults={"is_open": is_open})
        logger.info("Día %s marcado como %s", day, "abierto" if is_open else "cerrado")
        return Response(
            OpenDaySerializer(record).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def create(self, request):
        """
        Marca varios días a la vez.
        Body: { "dates": [ { "date": "2025-01-31", "is_open": false }, ... ] }
        Fechas o valores inválidos se saltan.
        """
        entries = request.data.get("dates") if hasattr(request.data, "get") else None
        if not isinstance(entries, list) or not entries:
            return Response({"dates": "Se requiere una lista de fechas."}, status=status.HTTP_400_BAD_REQUEST)

        saved = []
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("is_open"), bool):
                continue
            try:
                day = date.fromisoformat(str(entry.get("date")))
            except ValueError:
                continue
            record, _ = OpenDay.objects.update_or_create(date=day, defaults={"is_open": entry["is_open"]})
            saved.append(record)

        logger.info("%d días actualizados (de %d recibidos)", len(saved), len(entries))
        return Response({"count": len(saved), "results": OpenDaySerializer(saved, many=True).data})

    def destroy(self, request, day=None):
        day = _parse_date(day)
        deleted, _ = OpenDay.objects.filter(date=day).delete()
        if not deleted:
            return Response({"detail": "Registro no encontrado."}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


# -------------------------------------------------
# Reportes
# -------------------------------------------------
@api_view(["GET"])
@permission_classes([AllowAny])
def daily_report(request, day: str):
    return Response(DailyReportSerializer(reports.daily_report(_parse_date(day))).data)


@api_view(["GET"])
@permission_classes([AllowAny])
def daily_report_export(request, day: str):
    parsed = _parse_date(day)
    content = reports.export_daily_csv(parsed)
    if content is None:
        return Response({"detail": "No hay pedidos para esta fecha."}, status=status.HTTP_404_NOT_FOUND)

    resp = HttpResponse(content, content_type="text/csv; charset=utf-8")
    resp["Content-Disposition"] = f"attachment; filename=ventas_{parsed.isoformat()}.csv"
    return resp


@api_view(["GET"])
@permission_classes([AllowAny])
def sales_summary(request):
    start, end = reports.default_period(
        timezone.localdate(),
        _parse_date(request.query_params.get("start_date"), "start_date"),
        _parse_date(request.query_params.get("end_date"), "end_date"),
    )
    if start > end:
        return Response({"detail": "start_date no puede ser posterior a end_date."}, status=400)
    return Response(SalesSummarySerializer(reports.period_summary(start, end)).data)
