import logging
from typing import Any, Dict, List

from config import settings
from constants import PURCHASE_ORDER_DEFAULT_STATUS, DocumentKind
from errors import InvalidInput
from schemas import PurchaseOrderCreate, PurchaseOrderItem, PurchaseOrderUpdate
from services.documents_service import (
    dump_list,
    get_document,
    insert_numbered,
    list_documents,
    parse_stored_list,
    update_owned,
)
from services.totals_engine import compute_purchase_order_total

logger = logging.getLogger("billing-backend")

KIND = DocumentKind.PURCHASE_ORDER


def _displayable_items(row: Dict[str, Any]) -> List[Dict[str, Any]]:
    try:
        return dump_list(parse_stored_list(row.get("items"), PurchaseOrderItem))
    except InvalidInput as exc:
        logger.warning("Purchase order %s has unreadable items: %s", row.get("id"), exc)
        return []


def format_purchase_order(row: Dict[str, Any]) -> Dict[str, Any]:
    """Add the camelCase view of the snake_case purchase_orders columns."""
    return {
        **row,
        "poNumber": row.get("po_number"),
        "vendorName": row.get("vendor_name"),
        "issueDate": row.get("issue_date"),
        "items": _displayable_items(row),
        "status": row.get("status"),
        "currencyCode": row.get("currency_code"),
        "orderFormId": row.get("order_form_id"),
        "orderFormNumber": row.get("order_form_number"),
        "totalAmount": row.get("total_amount"),
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
    }


def _or_existing(value: Any, existing: Any) -> Any:
    # "" explicitly clears a link; None keeps the stored value
    if value == "":
        return None
    return existing if value is None else value


async def list_purchase_orders(user_id: str) -> List[Dict[str, Any]]:
    rows = await list_documents(user_id, KIND)
    return [format_purchase_order(row) for row in rows]


async def get_purchase_order(user_id: str, document_id: str) -> Dict[str, Any]:
    return format_purchase_order(await get_document(user_id, KIND, document_id))


async def create_purchase_order(
    user_id: str, payload: PurchaseOrderCreate
) -> Dict[str, Any]:
    record = {
        "vendor_name": payload.vendorName,
        "issue_date": payload.issueDate.isoformat() if payload.issueDate else None,
        "items": dump_list(payload.items),
        "status": payload.status or PURCHASE_ORDER_DEFAULT_STATUS,
        "currency_code": payload.currencyCode or settings.default_currency,
        "order_form_id": payload.orderFormId or None,
        "order_form_number": payload.orderFormNumber or None,
        "total_amount": compute_purchase_order_total(payload.items),
        "user_id": user_id,
    }
    return format_purchase_order(await insert_numbered(user_id, KIND, record))


async def update_purchase_order(
    user_id: str, document_id: str, payload: PurchaseOrderUpdate
) -> Dict[str, Any]:
    existing = await get_document(user_id, KIND, document_id)
    if payload.items:
        items = payload.items
    else:
        items = parse_stored_list(existing.get("items"), PurchaseOrderItem)
    issue_date = payload.issueDate.isoformat() if payload.issueDate else None
    record = {
        "po_number": payload.poNumber or existing.get("po_number"),
        "vendor_name": (
            payload.vendorName
            if payload.vendorName is not None
            else existing.get("vendor_name")
        ),
        "issue_date": issue_date or existing.get("issue_date"),
        "items": dump_list(items),
        "status": payload.status or existing.get("status"),
        "currency_code": payload.currencyCode or existing.get("currency_code"),
        "order_form_id": _or_existing(payload.orderFormId, existing.get("order_form_id")),
        "order_form_number": _or_existing(
            payload.orderFormNumber, existing.get("order_form_number")
        ),
        "total_amount": compute_purchase_order_total(items),
        "user_id": user_id,
    }
    return format_purchase_order(await update_owned(user_id, KIND, document_id, record))
