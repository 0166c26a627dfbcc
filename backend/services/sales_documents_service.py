"""Create/update orchestration for order forms and invoices.

Both kinds share one record shape: resolve the customer, compute totals,
allocate a number on create, and persist the totals next to the raw
items and charges.
"""

from typing import Any, Dict, Optional, Union

from constants import DocumentKind
from errors import InvalidInput
from schemas import (
    AdditionalCharge,
    Discount,
    InvoiceCreate,
    InvoiceUpdate,
    LineItem,
    OrderFormCreate,
    OrderFormUpdate,
    ValueType,
)
from services.documents_service import (
    customer_columns,
    dump_list,
    get_document,
    insert_numbered,
    parse_stored_list,
    resolve_customer,
    stored_number,
    update_owned,
)
from services.totals_engine import TotalsResult, compute_totals

SalesDocumentCreate = Union[OrderFormCreate, InvoiceCreate]
SalesDocumentUpdate = Union[OrderFormUpdate, InvoiceUpdate]

_LIST_FIELDS = {"customerId", "items", "additionalCharges"}


def totals_columns(totals: TotalsResult) -> Dict[str, float]:
    # persisted column names predate the widened result
    return {
        "subtotal": totals.items_subtotal,
        "discountAmount": totals.discount_amount,
        "taxAmount": totals.tax_amount,
        "total": totals.grand_total,
    }


def _stored_value_type(value: Any) -> Optional[ValueType]:
    if value is None or value == "":
        return None
    try:
        return ValueType(value)
    except ValueError as exc:
        raise InvalidInput(f"Stored discount type {value!r} is not recognised") from exc


def _discount_columns(discount: Discount) -> Dict[str, Any]:
    return {
        "discountEnabled": discount.enabled,
        "discountType": discount.kind.value if discount.kind else None,
        "discountValue": discount.amount,
    }


async def create_sales_document(
    user_id: str, kind: DocumentKind, payload: SalesDocumentCreate
) -> Dict[str, Any]:
    customer = await resolve_customer(user_id, payload.customerId)
    items = payload.items or []
    charges = payload.additionalCharges or []
    tax_rate = payload.taxRate or 0.0
    discount = Discount(
        enabled=bool(payload.discountEnabled),
        kind=payload.discountType,
        amount=payload.discountValue or 0.0,
    )
    totals = compute_totals(items, charges, tax_rate, discount)

    record = payload.model_dump(mode="json", exclude=_LIST_FIELDS)
    record.update(customer_columns(customer))
    record.update(_discount_columns(discount))
    record.update(totals_columns(totals))
    record.update(
        items=dump_list(items),
        additionalCharges=dump_list(charges),
        taxRate=tax_rate,
        msaCoverPageTemplateId=payload.msaCoverPageTemplateId or None,
        user_id=user_id,
    )
    return await insert_numbered(user_id, kind, record)


async def update_sales_document(
    user_id: str,
    kind: DocumentKind,
    document_id: str,
    payload: SalesDocumentUpdate,
) -> Dict[str, Any]:
    existing = await get_document(user_id, kind, document_id)
    customer = await resolve_customer(
        user_id, payload.customerId or existing.get("customerId")
    )

    if payload.items is not None:
        items = payload.items
    else:
        items = parse_stored_list(existing.get("items"), LineItem)
    if payload.additionalCharges is not None:
        charges = payload.additionalCharges
    else:
        charges = parse_stored_list(existing.get("additionalCharges"), AdditionalCharge)
    if payload.taxRate is not None:
        tax_rate = payload.taxRate
    else:
        tax_rate = stored_number(existing.get("taxRate"))

    discount = Discount(
        enabled=(
            payload.discountEnabled
            if payload.discountEnabled is not None
            else bool(existing.get("discountEnabled"))
        ),
        kind=payload.discountType or _stored_value_type(existing.get("discountType")),
        amount=(
            payload.discountValue
            if payload.discountValue is not None
            else stored_number(existing.get("discountValue"))
        ),
    )
    totals = compute_totals(items, charges, tax_rate, discount)

    changes = payload.model_dump(mode="json", exclude_none=True, exclude=_LIST_FIELDS)
    if "msaCoverPageTemplateId" in changes:
        changes["msaCoverPageTemplateId"] = changes["msaCoverPageTemplateId"] or None
    changes.update(customer_columns(customer))
    changes.update(_discount_columns(discount))
    changes.update(totals_columns(totals))
    changes.update(
        items=dump_list(items),
        additionalCharges=dump_list(charges),
        taxRate=tax_rate,
        user_id=user_id,
    )
    return await update_owned(user_id, kind, document_id, changes)
