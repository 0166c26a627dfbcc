from fastapi import APIRouter, Depends

from auth import get_current_user_id
from schemas import (
    PurchaseOrderTotalRequest,
    PurchaseOrderTotalResponse,
    TotalsPreviewRequest,
    TotalsPreviewResponse,
)
from services.totals_engine import compute_purchase_order_total, compute_totals

router = APIRouter(prefix="/api/totals", tags=["totals"])


@router.post("/preview", response_model=TotalsPreviewResponse)
async def preview_totals(
    payload: TotalsPreviewRequest,
    user_id: str = Depends(get_current_user_id),
) -> TotalsPreviewResponse:
    _ = user_id
    totals = compute_totals(
        payload.items, payload.additionalCharges, payload.taxRate, payload.discount
    )
    return TotalsPreviewResponse(
        itemsSubtotal=totals.items_subtotal,
        discountAmount=totals.discount_amount,
        subtotalAfterDiscount=totals.subtotal_after_discount,
        chargesTotal=totals.charges_total,
        subtotalBeforeTax=totals.subtotal_before_tax,
        taxAmount=totals.tax_amount,
        grandTotal=totals.grand_total,
    )


@router.post("/purchase-order-preview", response_model=PurchaseOrderTotalResponse)
async def preview_purchase_order_total(
    payload: PurchaseOrderTotalRequest,
    user_id: str = Depends(get_current_user_id),
) -> PurchaseOrderTotalResponse:
    _ = user_id
    return PurchaseOrderTotalResponse(
        totalAmount=compute_purchase_order_total(payload.items)
    )
