# sales/exceptions.py — errores de dominio + handler global de DRF
import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class UnknownProductError(Exception):
    """Un product_id del pedido no existe (p. ej. borrado entre validación y escritura)."""

    def __init__(self, product_ids):
        self.product_ids = sorted(product_ids)
        super().__init__(f"Producto(s) no encontrado(s): {', '.join(map(str, self.product_ids))}")


class AmountTooLargeError(Exception):
    """Un total de línea o de pedido no cabe en las columnas de montos."""

    def __init__(self, field, amount, index=None):
        self.field = field
        self.amount = amount
        self.index = index
        super().__init__(f"{field} fuera de rango: {amount}")

    def as_error(self):
        msg = f"Monto demasiado grande: {self.amount}"
        if self.index is None:
            return {"total": msg}
        return {"items": [{"index": self.index, "quantity": msg}]}


def api_exception_handler(exc, context):
    """
    Igual que el handler por defecto de DRF, más:
    - ProtectedError  -> 400 (elemento usado en otros registros)
    - IntegrityError  -> 400 (registro duplicado / FK inválida)
    - UnknownProductError -> 400 (el pedido completo se rechaza)
    - AmountTooLargeError -> 400 (totales fuera del rango de las columnas)
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    where = view.__class__.__name__ if view is not None else "?"

    if isinstance(exc, ProtectedError):
        logger.warning("Borrado bloqueado en %s: %s", where, exc)
        return Response(
            {"detail": "No se puede eliminar: elemento usado en otros registros."},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, UnknownProductError):
        logger.warning("Pedido rechazado en %s: %s", where, exc)
        return Response(
            {"items": [{"product_id": f"Inexistente: {pid}"} for pid in exc.product_ids]},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, AmountTooLargeError):
        logger.warning("Pedido rechazado en %s: %s", where, exc)
        return Response(exc.as_error(), status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, IntegrityError):
        logger.error("Error de integridad en %s: %s", where, exc)
        return Response({"detail": "Registro duplicado."}, status=status.HTTP_400_BAD_REQUEST)

    return None
