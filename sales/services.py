"""
Escritura de pedidos: crear, reemplazar y eliminar.

Cada operación corre en una sola transacción (transaction.atomic): los
ítems y el total del pedido se escriben juntos o no se escribe nada.
Los precios se leen del catálogo dentro de la transacción y se congelan
en cada OrderItem (unit_price / line_total).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from django.db import transaction

from .exceptions import AmountTooLargeError, UnknownProductError
from .models import Order, OrderItem, Product
from .pricing import (
    MAX_AMOUNT,
    PricedLine,
    compute_line_total,
    compute_order_total,
    effective_delivery_cost,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolvedLine:
    product: Product
    quantity: int
    masa: str
    unit_price: Decimal
    line_total: Decimal

    def as_priced(self) -> PricedLine:
        return PricedLine(self.quantity, self.unit_price, self.product.promotion_eligible)


def resolve_lines(items: List[Dict]) -> List[ResolvedLine]:
    """
    Busca los productos (una sola query) y calcula el total de cada línea.
    ``items``: [{"product_id": int, "quantity": int, "masa": str}, ...] ya validados.
    """
    ids = {int(it["product_id"]) for it in items}
    products = Product.objects.in_bulk(ids)
    missing = ids - set(products)
    if missing:
        raise UnknownProductError(missing)

    resolved = []
    for idx, it in enumerate(items, start=1):
        product = products[int(it["product_id"])]
        qty = int(it["quantity"])
        line_total = compute_line_total(qty, product.unit_price, product.promotion_eligible)
        if line_total > MAX_AMOUNT:
            raise AmountTooLargeError("line_total", line_total, index=idx)
        resolved.append(ResolvedLine(
            product=product,
            quantity=qty,
            masa=it.get("masa") or "",
            unit_price=product.unit_price,
            line_total=line_total,
        ))
    return resolved


def _order_total(lines: List[ResolvedLine], is_delivery, delivery_cost) -> Decimal:
    total = compute_order_total((ln.as_priced() for ln in lines), is_delivery, delivery_cost)
    if total > MAX_AMOUNT:
        raise AmountTooLargeError("total", total)
    return total


def _insert_items(order: Order, lines: List[ResolvedLine]) -> None:
    OrderItem.objects.bulk_create([
        OrderItem(
            order=order,
            product=ln.product,
            masa=ln.masa,
            quantity=ln.quantity,
            unit_price=ln.unit_price,
            line_total=ln.line_total,
        )
        for ln in lines
    ])


@transaction.atomic
def create_order(*, business_day, items, is_delivery=False, delivery_cost=None) -> Order:
    lines = resolve_lines(items)
    total = _order_total(lines, is_delivery, delivery_cost)

    order = Order.objects.create(
        business_day=business_day,
        is_delivery=bool(is_delivery),
        delivery_cost=effective_delivery_cost(is_delivery, delivery_cost),
        total=total,
    )
    _insert_items(order, lines)

    logger.info("Pedido #%s creado (%s, %d ítems, total %s)", order.pk, business_day, len(lines), total)
    return order


@transaction.atomic
def replace_order(order_id: int, *, business_day, items, is_delivery=False,
                  delivery_cost=None) -> Optional[Order]:
    """
    Reemplaza por completo el pedido: borra todos sus ítems y vuelve a
    insertarlos con precios actuales del catálogo. Devuelve None si el
    pedido no existe.
    """
    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        return None

    lines = resolve_lines(items)
    total = _order_total(lines, is_delivery, delivery_cost)

    order.items.all().delete()
    order.business_day = business_day
    order.is_delivery = bool(is_delivery)
    order.delivery_cost = effective_delivery_cost(is_delivery, delivery_cost)
    order.total = total
    order.save(update_fields=["business_day", "is_delivery", "delivery_cost", "total", "updated_at"])
    _insert_items(order, lines)

    logger.info("Pedido #%s actualizado (%s, %d ítems, total %s)", order.pk, business_day, len(lines), total)
    return order


@transaction.atomic
def delete_order(order_id: int) -> bool:
    deleted, _ = Order.objects.filter(pk=order_id).delete()
    if deleted:
        logger.info("Pedido #%s eliminado", order_id)
    return bool(deleted)
