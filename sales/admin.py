# sales/admin.py
from django.contrib import admin

from .forms import ProductAdminForm
from .models import OpenDay, Order, OrderItem, Product
from .pricing import format_money


# ===============================
# Product
# ===============================
@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    form = ProductAdminForm
    list_display = ("id", "name", "price_fmt", "promotion_eligible", "updated_at")
    list_filter = ("promotion_eligible",)
    search_fields = ("name",)
    fieldsets = (
        (None, {"fields": ("name", "promotion_eligible")}),
        ("Precio", {"fields": ("price_input",)}),
    )

    def price_fmt(self, obj):
        return format_money(obj.unit_price)
    price_fmt.short_description = "Precio"


# ===============================
# OpenDay
# ===============================
@admin.register(OpenDay)
class OpenDayAdmin(admin.ModelAdmin):
    list_display = ("date", "is_open", "updated_at")
    list_filter = ("is_open",)
    date_hierarchy = "date"


# ===============================
# Order / OrderItem (sólo lectura: los totales los calcula sales.services)
# ===============================
class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("product", "masa", "quantity", "unit_price", "line_total")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "business_day", "is_delivery", "total_fmt", "created_at")
    list_filter = ("business_day", "is_delivery")
    date_hierarchy = "business_day"
    readonly_fields = ("business_day", "is_delivery", "delivery_cost", "total", "created_at", "updated_at")
    inlines = [OrderItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def total_fmt(self, obj):
        return format_money(obj.total)
    total_fmt.short_description = "Total"
