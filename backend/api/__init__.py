from .invoices import router as invoices_router
from .order_forms import router as order_forms_router
from .purchase_orders import router as purchase_orders_router
from .totals import router as totals_router

__all__ = [
    "invoices_router",
    "order_forms_router",
    "purchase_orders_router",
    "totals_router",
]
