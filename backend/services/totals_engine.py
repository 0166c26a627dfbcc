"""Deterministic totals for order forms, invoices and purchase orders.

Pure arithmetic: no I/O, no rounding, no clamping. Negative inputs and
discounts larger than the subtotal propagate into the result unchanged;
display-level rounding belongs to callers.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from schemas import AdditionalCharge, Discount, LineItem, PurchaseOrderItem, ValueType

NO_DISCOUNT = Discount(enabled=False)


@dataclass(frozen=True)
class TotalsResult:
    items_subtotal: float
    discount_amount: float
    subtotal_after_discount: float
    charges_total: float
    subtotal_before_tax: float
    tax_amount: float
    grand_total: float


def items_subtotal(items: Iterable[LineItem]) -> float:
    return sum((item.quantity * item.unit_rate for item in items), 0.0)


def discount_amount(discount: Discount, subtotal: float) -> float:
    if not discount.enabled or discount.amount <= 0:
        return 0.0
    if discount.kind is ValueType.FIXED:
        return discount.amount
    if discount.kind is ValueType.PERCENTAGE:
        return subtotal * discount.amount / 100
    return 0.0


def charge_amount(charge: AdditionalCharge, base: float) -> float:
    # percentage charges never compound: each one sees the same base
    if charge.value_type is ValueType.PERCENTAGE:
        return base * charge.amount / 100
    return charge.amount


def compute_totals(
    items: Sequence[LineItem],
    charges: Sequence[AdditionalCharge],
    tax_rate: float,
    discount: Discount,
) -> TotalsResult:
    subtotal = items_subtotal(items)
    discount_value = discount_amount(discount, subtotal)
    after_discount = subtotal - discount_value
    charges_total = sum(
        (charge_amount(charge, after_discount) for charge in charges), 0.0
    )
    before_tax = after_discount + charges_total
    tax = before_tax * tax_rate / 100
    return TotalsResult(
        items_subtotal=subtotal,
        discount_amount=discount_value,
        subtotal_after_discount=after_discount,
        charges_total=charges_total,
        subtotal_before_tax=before_tax,
        tax_amount=tax,
        grand_total=before_tax + tax,
    )


def compute_purchase_order_total(items: Iterable[PurchaseOrderItem]) -> float:
    """Sum of quantity * procurement price.

    Runs through ``compute_totals`` with every optional component disabled
    so the two calculations cannot drift apart.
    """
    lines = [
        LineItem(quantity=item.quantity, unit_rate=item.procurement_price)
        for item in items
    ]
    return compute_totals(lines, [], 0.0, NO_DISCOUNT).grand_total
