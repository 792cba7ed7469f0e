"""
Reportes de ventas: resumen diario, exportación CSV y resumen por período.

Todo sale de los totales guardados (Order.total, OrderItem.line_total);
nunca se recalcula con los precios actuales del catálogo.
"""
from __future__ import annotations

import csv
import io
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.db.models import Avg, Count, DecimalField, Q, Sum
from django.db.models.functions import Coalesce

from .models import Order, OrderItem
from .pricing import ZERO, to_money

TOP_PRODUCTS_LIMIT = 5
SUMMARY_DEFAULT_DAYS = 7

CSV_HEADERS = [
    "Fecha",
    "Pedido",
    "Producto",
    "Masa",
    "Cantidad",
    "Precio Unit.",
    "Subtotal",
    "Entrega",
    "Costo Envío",
    "Total Pedido",
]

_MONEY = DecimalField(max_digits=12, decimal_places=2)


def _sum(field: str, **extra):
    return Coalesce(Sum(field, **extra), ZERO, output_field=_MONEY)


def _money(value) -> Decimal:
    return to_money(value if value is not None else ZERO)


# ---------------------------
# Reporte diario
# ---------------------------
def daily_totals(day: date) -> Dict[str, Any]:
    agg = Order.objects.filter(business_day=day).aggregate(
        orders=Count("id"),
        sales=_sum("total"),
        delivery=_sum("delivery_cost"),
        delivery_orders=Count("id", filter=Q(is_delivery=True)),
    )
    return {
        "orders": agg["orders"],
        "sales": _money(agg["sales"]),
        "delivery": _money(agg["delivery"]),
        "delivery_orders": agg["delivery_orders"],
    }


def product_summary(day: date) -> List[Dict[str, Any]]:
    rows = (
        OrderItem.objects.filter(order__business_day=day)
        .values("product__name", "masa", "product__promotion_eligible")
        .annotate(
            total_quantity=Sum("quantity"),
            avg_price=Avg("unit_price"),
            total=_sum("line_total"),
        )
        .order_by("-total", "product__name", "masa")
    )
    return [
        {
            "name": r["product__name"],
            "masa": r["masa"],
            "promotion_eligible": r["product__promotion_eligible"],
            "quantity": int(r["total_quantity"] or 0),
            "avg_price": _money(r["avg_price"]),
            "total": _money(r["total"]),
        }
        for r in rows
    ]


def top_products(day: date, limit: int = TOP_PRODUCTS_LIMIT) -> List[Dict[str, Any]]:
    rows = (
        OrderItem.objects.filter(order__business_day=day)
        .values("product__name")
        .annotate(total_quantity=Sum("quantity"), total=_sum("line_total"))
        .order_by("-total_quantity", "product__name")[:limit]
    )
    return [
        {"name": r["product__name"], "quantity": int(r["total_quantity"] or 0), "total": _money(r["total"])}
        for r in rows
    ]


def daily_report(day: date) -> Dict[str, Any]:
    return {
        "date": day,
        "totals": daily_totals(day),
        "products": product_summary(day),
        "top_products": top_products(day),
    }


# ---------------------------
# Exportación CSV
# ---------------------------
def export_daily_csv(day: date) -> Optional[str]:
    """
    Devuelve el CSV del día (con BOM UTF-8 para Excel) o None si no hay pedidos.
    Una fila por ítem y al final un resumen; las ventas del resumen cuentan
    cada pedido una sola vez.
    """
    items = (
        OrderItem.objects.filter(order__business_day=day)
        .select_related("order", "product")
        .order_by("order_id", "id")
    )
    if not items.exists():
        return None

    buf = io.StringIO()
    buf.write("\ufeff")
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)

    order_totals: Dict[int, Decimal] = {}
    for it in items:
        o = it.order
        order_totals[o.id] = o.total
        writer.writerow([
            o.business_day.isoformat(),
            o.id,
            it.product.name,
            it.get_masa_display() if it.masa else "",
            it.quantity,
            f"{it.unit_price:.2f}",
            f"{it.line_total:.2f}",
            "Sí" if o.is_delivery else "No",
            f"{o.delivery_cost:.2f}",
            f"{o.total:.2f}",
        ])

    total_sales = sum(order_totals.values(), ZERO)
    writer.writerow([])
    writer.writerow(["RESUMEN DEL DÍA"])
    writer.writerow(["Total de pedidos:", len(order_totals)])
    writer.writerow(["Total de ventas:", f"${total_sales:.2f}"])
    return buf.getvalue()


# ---------------------------
# Resumen por período
# ---------------------------
def default_period(today: date, start: Optional[date] = None, end: Optional[date] = None):
    end = end or today
    start = start or (today - timedelta(days=SUMMARY_DEFAULT_DAYS))
    return start, end


def period_summary(start: date, end: date) -> Dict[str, Any]:
    qs = Order.objects.filter(business_day__range=(start, end))

    daily = (
        qs.values("business_day")
        .annotate(orders=Count("id"), sales=_sum("total"))
        .order_by("-business_day")
    )
    agg = qs.aggregate(orders=Count("id"), sales=_sum("total"), avg=Avg("total"))

    return {
        "period": {"start": start, "end": end},
        "totals": {
            "orders": agg["orders"],
            "sales": _money(agg["sales"]),
            "avg_order_value": _money(agg["avg"]),
        },
        "daily_sales": [
            {"business_day": r["business_day"], "orders": r["orders"], "sales": _money(r["sales"])}
            for r in daily
        ],
    }
