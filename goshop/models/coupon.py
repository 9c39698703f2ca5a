from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

PERCENTAGE = "percentage"
FIXED = "fixed"


@dataclass(frozen=True)
class Coupon:
    code: str
    kind: str              # percentage or fixed
    value: Decimal         # rate for percentage, cents for fixed
    min_order_cents: int


COUPONS: Dict[str, Coupon] = {
    "FRESH15": Coupon("FRESH15", PERCENTAGE, Decimal("0.15"), 5000),
    "MAX500": Coupon("MAX500", FIXED, Decimal("500"), 3000),
    "NEWUSER": Coupon("NEWUSER", PERCENTAGE, Decimal("0.20"), 2500),
    "SAVE10": Coupon("SAVE10", FIXED, Decimal("1000"), 6000),
}


def lookup_coupon(code: str) -> Optional[Coupon]:
    return COUPONS.get((code or "").strip().upper())
