import json
from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ValueType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


def _parse_json_list(value: Any) -> Any:
    # items/charges may arrive as a JSON-encoded string from form posts
    if isinstance(value, str):
        if not value.strip():
            return []
        return json.loads(value)
    return value


def _blank_to_none(value: Any) -> Any:
    if value == "":
        return None
    return value


class LineItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False, extra="allow")

    id: Optional[str] = None
    description: str = ""
    quantity: float
    unit_rate: float = Field(..., alias="rate")


class PurchaseOrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False, extra="allow")

    id: Optional[str] = None
    description: str = ""
    quantity: float
    procurement_price: float = Field(..., alias="procurementPrice")
    vendor_name: Optional[str] = Field(default=None, alias="vendorName")


class AdditionalCharge(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False, extra="allow")

    id: Optional[str] = None
    name: str = ""
    value_type: ValueType = Field(..., alias="valueType")
    amount: float = Field(..., alias="value")


class Discount(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    enabled: bool = False
    kind: Optional[ValueType] = Field(default=None, alias="type")
    amount: float = Field(default=0.0, alias="value")

    @field_validator("kind", mode="before")
    @classmethod
    def blank_kind_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class SalesDocumentFields(BaseModel):
    """Fields shared by order forms and invoices; all optional so updates can be partial."""

    model_config = ConfigDict(allow_inf_nan=False)

    issueDate: Optional[date] = None
    items: Optional[List[LineItem]] = None
    additionalCharges: Optional[List[AdditionalCharge]] = None
    taxRate: Optional[float] = None
    discountEnabled: Optional[bool] = None
    discountDescription: Optional[str] = None
    discountType: Optional[ValueType] = None
    discountValue: Optional[float] = None
    msaContent: Optional[str] = None
    msaCoverPageTemplateId: Optional[str] = None
    termsAndConditions: Optional[str] = None
    status: Optional[str] = None
    paymentTerms: Optional[str] = None
    customPaymentTerms: Optional[str] = None
    commitmentPeriod: Optional[str] = None
    customCommitmentPeriod: Optional[str] = None
    paymentFrequency: Optional[str] = None
    customPaymentFrequency: Optional[str] = None
    serviceStartDate: Optional[date] = None
    serviceEndDate: Optional[date] = None

    @field_validator("items", "additionalCharges", mode="before")
    @classmethod
    def parse_json_lists(cls, value: Any) -> Any:
        return _parse_json_list(value)

    @field_validator("discountType", mode="before")
    @classmethod
    def blank_discount_type_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class OrderFormCreate(SalesDocumentFields):
    customerId: str
    validUntilDate: Optional[date] = None


class OrderFormUpdate(SalesDocumentFields):
    customerId: Optional[str] = None
    orderFormNumber: Optional[str] = None
    validUntilDate: Optional[date] = None


class InvoiceCreate(SalesDocumentFields):
    customerId: str
    dueDate: Optional[date] = None


class InvoiceUpdate(SalesDocumentFields):
    customerId: Optional[str] = None
    invoiceNumber: Optional[str] = None
    dueDate: Optional[date] = None


class PurchaseOrderCreate(BaseModel):
    vendorName: Optional[str] = None
    issueDate: Optional[date] = None
    items: List[PurchaseOrderItem] = Field(default_factory=list)
    status: Optional[str] = None
    currencyCode: Optional[str] = None
    orderFormId: Optional[str] = None
    orderFormNumber: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def parse_json_items(cls, value: Any) -> Any:
        return _parse_json_list(value)


class PurchaseOrderUpdate(BaseModel):
    poNumber: Optional[str] = None
    vendorName: Optional[str] = None
    issueDate: Optional[date] = None
    items: Optional[List[PurchaseOrderItem]] = None
    status: Optional[str] = None
    currencyCode: Optional[str] = None
    orderFormId: Optional[str] = None
    orderFormNumber: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def parse_json_items(cls, value: Any) -> Any:
        return _parse_json_list(value)


class NextNumberResponse(BaseModel):
    prefix: str
    next_number: int
    document_number: str


class TotalsPreviewRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    items: List[LineItem] = Field(default_factory=list)
    additionalCharges: List[AdditionalCharge] = Field(default_factory=list)
    taxRate: float = 0.0
    discount: Discount = Field(default_factory=Discount)


class TotalsPreviewResponse(BaseModel):
    itemsSubtotal: float
    discountAmount: float
    subtotalAfterDiscount: float
    chargesTotal: float
    subtotalBeforeTax: float
    taxAmount: float
    grandTotal: float


class PurchaseOrderTotalRequest(BaseModel):
    items: List[PurchaseOrderItem] = Field(default_factory=list)


class PurchaseOrderTotalResponse(BaseModel):
    totalAmount: float
