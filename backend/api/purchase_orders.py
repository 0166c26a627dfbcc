from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response, status

from auth import get_current_user_id
from constants import DocumentKind
from schemas import NextNumberResponse, PurchaseOrderCreate, PurchaseOrderUpdate
from services import documents_service, purchase_orders_service
from services.numbering_service import preview_document_number

router = APIRouter(prefix="/api/purchase-orders", tags=["purchase-orders"])


@router.get("")
async def list_purchase_orders(
    user_id: str = Depends(get_current_user_id),
) -> List[Dict[str, Any]]:
    return await purchase_orders_service.list_purchase_orders(user_id)


@router.get("/next-number", response_model=NextNumberResponse)
async def read_next_number(
    user_id: str = Depends(get_current_user_id),
) -> NextNumberResponse:
    return await preview_document_number(user_id, DocumentKind.PURCHASE_ORDER)


@router.get("/{document_id}")
async def read_purchase_order(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Dict[str, Any]:
    return await purchase_orders_service.get_purchase_order(user_id, document_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_purchase_order(
    payload: PurchaseOrderCreate,
    user_id: str = Depends(get_current_user_id),
) -> Dict[str, Any]:
    return await purchase_orders_service.create_purchase_order(user_id, payload)


@router.put("/{document_id}")
async def update_purchase_order(
    document_id: str,
    payload: PurchaseOrderUpdate,
    user_id: str = Depends(get_current_user_id),
) -> Dict[str, Any]:
    return await purchase_orders_service.update_purchase_order(
        user_id, document_id, payload
    )


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_purchase_order(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Response:
    await documents_service.delete_document(
        user_id, DocumentKind.PURCHASE_ORDER, document_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
