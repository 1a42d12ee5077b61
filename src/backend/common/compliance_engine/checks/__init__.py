from .item_physical_weight import ITEM_PHYSICAL_WEIGHT
from .item_packaging_plausibility import ITEM_PACKAGING_PLAUSIBILITY
from .item_price_anomaly import ITEM_PRICE_ANOMALY
from .item_hs_regulatory import ITEM_HS_REGULATORY
from .item_declaration_elements import ITEM_DECLARATION_ELEMENTS
from .item_user_rules import ITEM_USER_RULES

__all__ = [
    "ITEM_PHYSICAL_WEIGHT",
    "ITEM_PACKAGING_PLAUSIBILITY",
    "ITEM_PRICE_ANOMALY",
    "ITEM_HS_REGULATORY",
    "ITEM_DECLARATION_ELEMENTS",
    "ITEM_USER_RULES",
]
