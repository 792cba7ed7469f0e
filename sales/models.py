# sales/models.py — catálogo (Product), pedidos (Order/OrderItem) y días de operación (OpenDay)
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


# --------- Productos ---------
class Product(models.Model):
    name = models.CharField(max_length=120, unique=True)
    unit_price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Precio unitario en dólares",
    )
    # pupusa pequeña: aplica la promoción 3x$1.00
    promotion_eligible = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} (${self.unit_price})"


# --------- Pedidos ---------
class Order(models.Model):
    business_day = models.DateField(db_index=True, help_text="Día de venta al que pertenece el pedido")
    is_delivery = models.BooleanField(default=False)
    delivery_cost = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal("0.00"))
    # suma de line_total + delivery_cost, calculado en sales.services
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Pedido #{self.id} - {self.business_day}"


class OrderItem(models.Model):
    MASA_CHOICES = [
        ("maiz", "Maíz"),
        ("arroz", "Arroz"),
    ]

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey(Product, related_name="order_items", on_delete=models.PROTECT)
    masa = models.CharField(max_length=10, choices=MASA_CHOICES, blank=True, default="")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # precio y total congelados al momento de guardar el pedido
    unit_price = models.DecimalField(max_digits=8, decimal_places=2)
    line_total = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity}x {self.product.name} en Pedido #{self.order_id}"


# --------- Días abiertos/cerrados ---------
class OpenDay(models.Model):
    date = models.DateField(unique=True)
    is_open = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]

    def __str__(self):
        return f"{self.date} ({'abierto' if self.is_open else 'cerrado'})"

    @classmethod
    def is_open_on(cls, day) -> bool:
        """Sin registro para la fecha = abierto."""
        record = cls.objects.filter(date=day).only("is_open").first()
        return True if record is None else record.is_open
