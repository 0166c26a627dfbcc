from enum import Enum

BRANDING_SETTINGS_TABLE = "branding_settings"
CUSTOMER_TABLE = "customer"

NEXT_SEQUENCE_RPC = "next_document_sequence"
PEEK_SEQUENCE_RPC = "peek_document_sequence"
ADVANCE_SEQUENCE_RPC = "advance_document_sequence"

UNIQUE_VIOLATION_CODE = "23505"

PURCHASE_ORDER_DEFAULT_STATUS = "Draft"


class DocumentKind(str, Enum):
    ORDER_FORM = "order_form"
    INVOICE = "invoice"
    PURCHASE_ORDER = "purchase_order"


DOCUMENT_TABLES = {
    DocumentKind.ORDER_FORM: "order_form",
    DocumentKind.INVOICE: "invoice",
    DocumentKind.PURCHASE_ORDER: "purchase_orders",
}

NUMBER_COLUMNS = {
    DocumentKind.ORDER_FORM: "orderFormNumber",
    DocumentKind.INVOICE: "invoiceNumber",
    DocumentKind.PURCHASE_ORDER: "po_number",
}

PREFIX_SETTINGS_COLUMNS = {
    DocumentKind.ORDER_FORM: "orderFormPrefix",
    DocumentKind.INVOICE: "invoicePrefix",
    DocumentKind.PURCHASE_ORDER: "purchaseOrderPrefix",
}

DEFAULT_PREFIXES = {
    DocumentKind.ORDER_FORM: "OF-",
    DocumentKind.INVOICE: "INV-",
    DocumentKind.PURCHASE_ORDER: "PO-",
}
