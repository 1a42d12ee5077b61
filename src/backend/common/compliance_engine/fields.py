from __future__ import annotations

from operator import attrgetter
from typing import Any, Callable, Dict, Union

from .models import LineItem, LineItemField

# Explicit accessor table; user rules can only reach fields listed here.
FIELD_ACCESSORS: Dict[LineItemField, Callable[[LineItem], Any]] = {
    LineItemField.PRODUCT_NAME_LOCAL: attrgetter("product_name_local"),
    LineItemField.PRODUCT_NAME_FOREIGN: attrgetter("product_name_foreign"),
    LineItemField.HS_CODE: attrgetter("hs_code"),
    LineItemField.QUANTITY: attrgetter("quantity"),
    LineItemField.UNIT: attrgetter("unit"),
    LineItemField.GROSS_WEIGHT: attrgetter("gross_weight"),
    LineItemField.NET_WEIGHT: attrgetter("net_weight"),
    LineItemField.VOLUME: attrgetter("volume"),
    LineItemField.CARTON_COUNT: attrgetter("carton_count"),
    LineItemField.PACKAGE_TYPE: attrgetter("package_type"),
    LineItemField.UNIT_PRICE_FOREIGN: attrgetter("unit_price_foreign"),
    LineItemField.TOTAL_PRICE_FOREIGN: attrgetter("total_price_foreign"),
    LineItemField.UNIT_COST_DOMESTIC: attrgetter("unit_cost_domestic"),
    LineItemField.TOTAL_COST_DOMESTIC: attrgetter("total_cost_domestic"),
    LineItemField.VAT_RATE_PERCENT: attrgetter("vat_rate_percent"),
    LineItemField.TAX_REFUND_RATE_PERCENT: attrgetter("tax_refund_rate_percent"),
    LineItemField.DECLARATION_ELEMENTS: attrgetter("declaration_elements"),
    LineItemField.REMARK: attrgetter("remark"),
    LineItemField.ORIGIN: attrgetter("origin"),
}

FIELD_LABELS: Dict[LineItemField, str] = {
    LineItemField.PRODUCT_NAME_LOCAL: "Product name (local)",
    LineItemField.PRODUCT_NAME_FOREIGN: "Product name (foreign)",
    LineItemField.HS_CODE: "HS code",
    LineItemField.QUANTITY: "Quantity",
    LineItemField.UNIT: "Unit",
    LineItemField.GROSS_WEIGHT: "Gross weight (kg)",
    LineItemField.NET_WEIGHT: "Net weight (kg)",
    LineItemField.VOLUME: "Volume (CBM)",
    LineItemField.CARTON_COUNT: "Carton count",
    LineItemField.PACKAGE_TYPE: "Package type",
    LineItemField.UNIT_PRICE_FOREIGN: "Unit price (document currency)",
    LineItemField.TOTAL_PRICE_FOREIGN: "Total price (document currency)",
    LineItemField.UNIT_COST_DOMESTIC: "Unit cost (CNY)",
    LineItemField.TOTAL_COST_DOMESTIC: "Total cost (CNY)",
    LineItemField.VAT_RATE_PERCENT: "VAT rate (%)",
    LineItemField.TAX_REFUND_RATE_PERCENT: "Export tax refund rate (%)",
    LineItemField.DECLARATION_ELEMENTS: "Declaration elements",
    LineItemField.REMARK: "Remark preset",
    LineItemField.ORIGIN: "Origin",
}


def get_field_value(item: LineItem, field: Union[LineItemField, str]) -> Any:
    """Read a line item field by name.

    Raises ValueError for names outside `LineItemField`.
    """
    return FIELD_ACCESSORS[LineItemField(field)](item)
