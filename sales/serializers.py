# sales/serializers.py — catálogo + pedido con SERIALIZERS separados para escritura/lectura
# Objetivo: POST/PUT /api/orders/ nunca revientan en 500; siempre 400 con mensajes claros.

from rest_framework import serializers

from . import services
from .models import OpenDay, Order, OrderItem, Product
from .pricing import MAX_LINE_QUANTITY, format_money


# --------- Producto ---------
class ProductSerializer(serializers.ModelSerializer):
    price_formatted = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "unit_price",
            "price_formatted",
            "promotion_eligible",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_price_formatted(self, obj):
        return format_money(obj.unit_price)

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Obligatorio.")
        return value


# --------- Días abiertos/cerrados ---------
class OpenDaySerializer(serializers.ModelSerializer):
    class Meta:
        model = OpenDay
        fields = ["id", "date", "is_open", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


# ===========================
#  PEDIDO / ÍTEMS (WRITE)
# ===========================
class OrderItemWriteSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_LINE_QUANTITY)
    masa = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")

    def validate_masa(self, value):
        # el frontend envía "maíz" con tilde
        value = (value or "").strip().lower().replace("í", "i")
        valid = {key for key, _label in OrderItem.MASA_CHOICES}
        if value and value not in valid:
            raise serializers.ValidationError(f"Masa inválida: use {', '.join(sorted(valid))}.")
        return value


class OrderWriteSerializer(serializers.Serializer):
    """
    Estrategia "validar todo antes de grabar":
    - business_day obligatorio, items no vacío, quantity ≥ 1.
    - Todos los product_id deben existir; si uno falla se rechaza el pedido entero.
    - Los totales se calculan en sales.services (nunca se aceptan del cliente).
    - delivery_cost sólo se valida en pedidos con entrega; si no, se descarta.
    """
    business_day = serializers.DateField()
    is_delivery = serializers.BooleanField(required=False, default=False)
    delivery_cost = serializers.DecimalField(
        max_digits=8, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    items = OrderItemWriteSerializer(many=True)

    def to_internal_value(self, data):
        if hasattr(data, "copy") and "delivery_cost" in data:
            try:
                is_delivery = self.fields["is_delivery"].run_validation(data.get("is_delivery", False))
            except serializers.ValidationError:
                is_delivery = True  # el error de is_delivery se reporta igual
            if not is_delivery:
                data = data.copy()
                data.pop("delivery_cost")
        return super().to_internal_value(data)

    def validate_items(self, items):
        if not items:
            raise serializers.ValidationError("Obligatorio y no puede estar vacío.")

        ids = {it["product_id"] for it in items}
        found = set(Product.objects.filter(pk__in=ids).values_list("pk", flat=True))
        errors = [
            {"index": idx, "product_id": f"Inexistente: {it['product_id']}"}
            for idx, it in enumerate(items, start=1)
            if it["product_id"] not in found
        ]
        if errors:
            raise serializers.ValidationError(errors)
        return items

    def create(self, validated_data):
        return services.create_order(**validated_data)

    def update(self, instance, validated_data):
        order = services.replace_order(instance.pk, **validated_data)
        if order is None:
            raise serializers.ValidationError({"detail": "El pedido ya no existe."})
        return order

    def to_representation(self, instance):
        return OrderReadSerializer(instance, context=self.context).data


# ===========================
#  PEDIDO / ÍTEMS (READ)
# ===========================
class OrderItemReadSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    promotion_eligible = serializers.BooleanField(source="product.promotion_eligible", read_only=True)

    class Meta:
        model = OrderItem
        fields = (
            "id",
            "product_id",
            "product_name",
            "promotion_eligible",
            "masa",
            "quantity",
            "unit_price",
            "line_total",
        )


class OrderReadSerializer(serializers.ModelSerializer):
    items = OrderItemReadSerializer(many=True, read_only=True)
    total_formatted = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = (
            "id",
            "business_day",
            "is_delivery",
            "delivery_cost",
            "total",
            "total_formatted",
            "items",
            "created_at",
            "updated_at",
        )

    def get_total_formatted(self, obj):
        return format_money(obj.total)


# ===========================
#  REPORTES (sólo lectura, a partir de dicts de sales.reports)
# ===========================
def _money_field():
    return serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class DayTotalsSerializer(serializers.Serializer):
    orders = serializers.IntegerField()
    sales = _money_field()
    delivery = _money_field()
    delivery_orders = serializers.IntegerField()


class ProductSalesSerializer(serializers.Serializer):
    name = serializers.CharField()
    masa = serializers.CharField()
    promotion_eligible = serializers.BooleanField()
    quantity = serializers.IntegerField()
    avg_price = _money_field()
    total = _money_field()


class TopProductSerializer(serializers.Serializer):
    name = serializers.CharField()
    quantity = serializers.IntegerField()
    total = _money_field()


class DailyReportSerializer(serializers.Serializer):
    date = serializers.DateField()
    totals = DayTotalsSerializer()
    products = ProductSalesSerializer(many=True)
    top_products = TopProductSerializer(many=True)


class PeriodSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()


class PeriodTotalsSerializer(serializers.Serializer):
    orders = serializers.IntegerField()
    sales = _money_field()
    avg_order_value = _money_field()


class DailySalesSerializer(serializers.Serializer):
    business_day = serializers.DateField()
    orders = serializers.IntegerField()
    sales = _money_field()


class SalesSummarySerializer(serializers.Serializer):
    period = PeriodSerializer()
    totals = PeriodTotalsSerializer()
    daily_sales = DailySalesSerializer(many=True)
