# sales/pricing.py — cálculo de totales de línea y de pedido (promoción 3x$1.00)
"""
Única fuente de verdad para los montos de un pedido.

Tanto la creación como la edición de pedidos (sales.services) pasan por
``compute_line_total``/``compute_order_total``; los reportes nunca recalculan,
sólo leen los totales guardados.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple

# Promoción de pupusas pequeñas: cada grupo completo de 3 unidades cuesta $1.00
BUNDLE_SIZE = 3
BUNDLE_PRICE = Decimal("1.00")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# tope de las columnas line_total/total (max_digits=10, decimal_places=2)
MAX_AMOUNT = Decimal("99999999.99")
# tope por línea de pedido
MAX_LINE_QUANTITY = 10_000


class PricedLine(NamedTuple):
    quantity: int
    unit_price: Decimal
    promotion_eligible: bool


def to_money(value) -> Decimal:
    """
    Convierte a Decimal con 2 decimales (redondeo half-up, "lejos del cero").
    Acepta Decimal, int o str; los float pasan por str() para no arrastrar
    la representación binaria (0.1 -> '0.1', no 0.1000000000000000055...).
    """
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_line_total(quantity: int, unit_price, promotion_eligible: bool) -> Decimal:
    if quantity < 0:
        raise ValueError(f"quantity debe ser >= 0 (recibido {quantity})")
    price = Decimal(str(unit_price)) if isinstance(unit_price, float) else Decimal(unit_price)
    if price < 0:
        raise ValueError(f"unit_price no puede ser negativo (recibido {unit_price})")

    if promotion_eligible:
        complete_groups, remaining = divmod(quantity, BUNDLE_SIZE)
        total = complete_groups * BUNDLE_PRICE + remaining * price
    else:
        total = quantity * price
    return to_money(total)


def effective_delivery_cost(is_delivery: bool, delivery_cost=None) -> Decimal:
    # sin entrega el costo es 0 aunque venga un valor en el payload
    if not is_delivery:
        return ZERO
    return to_money(delivery_cost)


def compute_order_total(lines: Iterable, is_delivery: bool, delivery_cost=None) -> Decimal:
    """
    Suma de los totales de línea + costo de entrega (sólo si ``is_delivery``).

    ``lines``: iterable de ``PricedLine`` o tuplas (quantity, unit_price, promotion_eligible).
    """
    total = ZERO
    for quantity, unit_price, promotion_eligible in lines:
        total += compute_line_total(quantity, unit_price, promotion_eligible)
    return to_money(total + effective_delivery_cost(is_delivery, delivery_cost))


def format_money(value) -> str:
    """Decimal -> '$1,234.50' (para admin y respuestas *_formatted)."""
    try:
        return f"${value:,.2f}"
    except (TypeError, ValueError):
        return "—"
