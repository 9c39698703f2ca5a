"""Side-effect-free money arithmetic for carts and orders.

Amounts are integer cents. Rates go through ``Decimal`` and every derived
amount is rounded half-up back to whole cents.
"""
from dataclasses import dataclass, asdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Sequence

from goshop.models.coupon import Coupon, PERCENTAGE

CENT = Decimal("1")


class PricedLine(NamedTuple):
    price_cents: int
    quantity: int
    selected: bool = True


@dataclass(frozen=True)
class PricingSettings:
    delivery_fee_cents: int = 1000
    free_delivery_threshold_cents: int = 10000
    tax_rate: Decimal = Decimal("0.125")
    gift_wrap_fee_cents: int = 2000
    same_day_fee_cents: int = 1500
    next_day_fee_cents: int = 800
    later_fee_cents: int = 500

    @classmethod
    def from_config(cls, config):
        return cls(
            delivery_fee_cents=int(config["DELIVERY_FEE_CENTS"]),
            free_delivery_threshold_cents=int(config["FREE_DELIVERY_THRESHOLD_CENTS"]),
            tax_rate=Decimal(str(config["TAX_RATE"])),
            gift_wrap_fee_cents=int(config["GIFT_WRAP_FEE_CENTS"]),
            same_day_fee_cents=int(config["SAME_DAY_FEE_CENTS"]),
            next_day_fee_cents=int(config["NEXT_DAY_FEE_CENTS"]),
            later_fee_cents=int(config["LATER_FEE_CENTS"]),
        )


@dataclass(frozen=True)
class Totals:
    subtotal_cents: int
    discount_cents: int
    delivery_fee_cents: int
    gift_wrap_fee_cents: int
    tax_cents: int
    total_cents: int

    def to_dict(self):
        return asdict(self)


def to_cents(amount) -> int:
    return int(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def format_cents(cents: int) -> str:
    """Render cents as a two-decimal major-unit string, e.g. ``"15.00"``."""
    return str((Decimal(cents) / 100).quantize(Decimal("0.01")))


def compute_subtotal(lines: Iterable[PricedLine], selected_only: bool = True) -> int:
    return sum(
        line.price_cents * line.quantity
        for line in lines
        if line.selected or not selected_only
    )


def compute_discount(subtotal: int, coupons: Sequence[Coupon]) -> int:
    """Stack every coupon whose minimum order the subtotal meets."""
    total = Decimal(0)
    for coupon in coupons:
        if coupon.min_order_cents > subtotal:
            continue
        if coupon.kind == PERCENTAGE:
            total += Decimal(subtotal) * coupon.value
        else:
            total += coupon.value
    return to_cents(total)


def compute_delivery_fee(subtotal: int, threshold: int, flat_fee: int) -> int:
    return 0 if subtotal >= threshold else flat_fee


def delivery_fee_for_date(delivery_date: date, today: date, settings: PricingSettings) -> int:
    days = (delivery_date - today).days
    if days <= 0:
        return settings.same_day_fee_cents
    if days == 1:
        return settings.next_day_fee_cents
    return settings.later_fee_cents


def taxable_amount(subtotal: int, discount: int, gift_wrap_fee: int = 0) -> int:
    # canonical tax base for every checkout flow
    return max(0, subtotal - discount) + gift_wrap_fee


def compute_tax(taxable: int, rate) -> int:
    return to_cents(Decimal(taxable) * Decimal(str(rate)))


def compute_total(subtotal: int, discount: int, delivery_fee: int,
                  gift_wrap_fee: int, tax: int) -> int:
    return max(0, subtotal - discount + delivery_fee + gift_wrap_fee + tax)


def quote(lines: Iterable[PricedLine], coupons: Sequence[Coupon], gift_wrap: bool,
          settings: PricingSettings, delivery_fee=None, selected_only: bool = True) -> Totals:
    """Price a set of lines.

    ``delivery_fee`` overrides the storefront threshold rule, which is what
    date-based checkout passes in.
    """
    subtotal = compute_subtotal(lines, selected_only=selected_only)
    discount = compute_discount(subtotal, coupons)
    if delivery_fee is None:
        delivery_fee = compute_delivery_fee(
            subtotal,
            settings.free_delivery_threshold_cents,
            settings.delivery_fee_cents,
        )
    gift_wrap_fee = settings.gift_wrap_fee_cents if gift_wrap else 0
    tax = compute_tax(taxable_amount(subtotal, discount, gift_wrap_fee), settings.tax_rate)
    return Totals(
        subtotal_cents=subtotal,
        discount_cents=discount,
        delivery_fee_cents=delivery_fee,
        gift_wrap_fee_cents=gift_wrap_fee,
        tax_cents=tax,
        total_cents=compute_total(subtotal, discount, delivery_fee, gift_wrap_fee, tax),
    )


__all__ = [
    "PricedLine",
    "PricingSettings",
    "Totals",
    "to_cents",
    "format_cents",
    "compute_subtotal",
    "compute_discount",
    "compute_delivery_fee",
    "delivery_fee_for_date",
    "taxable_amount",
    "compute_tax",
    "compute_total",
    "quote",
]
