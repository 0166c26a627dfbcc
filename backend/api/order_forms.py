from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response, status

from auth import get_current_user_id
from constants import DocumentKind
from schemas import NextNumberResponse, OrderFormCreate, OrderFormUpdate
from services import documents_service
from services.numbering_service import preview_document_number
from services.sales_documents_service import (
    create_sales_document,
    update_sales_document,
)

router = APIRouter(prefix="/api/order-forms", tags=["order-forms"])

KIND = DocumentKind.ORDER_FORM


@router.get("")
async def list_order_forms(
    user_id: str = Depends(get_current_user_id),
) -> List[Dict[str, Any]]:
    return await documents_service.list_documents(user_id, KIND)


@router.get("/next-number", response_model=NextNumberResponse)
async def read_next_number(
    user_id: str = Depends(get_current_user_id),
) -> NextNumberResponse:
    return await preview_document_number(user_id, KIND)


@router.get("/{document_id}")
async def read_order_form(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Dict[str, Any]:
    return await documents_service.get_document(user_id, KIND, document_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order_form(
    payload: OrderFormCreate,
    user_id: str = Depends(get_current_user_id),
) -> Dict[str, Any]:
    return await create_sales_document(user_id, KIND, payload)


@router.put("/{document_id}")
async def update_order_form(
    document_id: str,
    payload: OrderFormUpdate,
    user_id: str = Depends(get_current_user_id),
) -> Dict[str, Any]:
    return await update_sales_document(user_id, KIND, document_id, payload)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order_form(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Response:
    await documents_service.delete_document(user_id, KIND, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
