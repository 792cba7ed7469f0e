# sales/forms.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from django import forms
from .models import Product


def _parse_price(raw: str) -> Decimal:
    """
    Convierte strings como '$ 1,234.50', '0.50', '0,50', '1.234,50', '2' en Decimal(2 decimales).
    Reglas:
      - quita '$' y espacios
      - si vienen coma y punto, el último separador es el decimal
      - si sólo viene coma, es separador decimal
    """
    s = (raw or "").strip()
    if not s:
        raise forms.ValidationError("El precio es obligatorio.")
    s = s.replace("$", "").replace(" ", "")

    if "," in s and "." in s:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", ".")

    try:
        val = Decimal(s)
    except InvalidOperation:
        raise forms.ValidationError("Valor inválido. Use algo como 0.50 o 1,25.")

    if not val.is_finite() or val <= 0:
        raise forms.ValidationError("El precio debe ser mayor que cero.")

    return val.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ProductAdminForm(forms.ModelForm):
    """
    Muestra 'Precio ($)' como texto libre (acepta 0.50, 0,50, $1.25) y lo guarda en unit_price.
    """
    price_input = forms.CharField(
        label="Precio ($)",
        help_text="Ej.: 0.50 — las pupusas pequeñas entran en la promoción 3x$1.00",
    )

    class Meta:
        model = Product
        fields = ["name", "promotion_eligible"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk and self.instance.unit_price is not None:
            self.fields["price_input"].initial = f"{self.instance.unit_price:.2f}"

    def clean_price_input(self):
        return _parse_price(self.cleaned_data.get("price_input"))

    def save(self, commit=True):
        instance = super().save(commit=False)
        instance.unit_price = self.cleaned_data["price_input"]
        if commit:
            instance.save()
        return instance
