import asyncio
import json
import logging
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from config import settings
from constants import DOCUMENT_TABLES, NUMBER_COLUMNS, DocumentKind
from errors import CustomerNotFound, DocumentNotFound, DuplicateNumber, InvalidInput
from repositories import customers_repository, documents_repository
from services import numbering_service

logger = logging.getLogger("billing-backend")

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_stored_list(value: Any, model: Type[ModelT]) -> List[ModelT]:
    """Rebuild typed items/charges from a stored column (jsonb list or JSON text)."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"Stored {model.__name__} list is not valid JSON") from exc
    if not isinstance(value, list):
        raise InvalidInput(f"Stored {model.__name__} list is not a list")
    try:
        return [model.model_validate(entry) for entry in value]
    except ValidationError as exc:
        raise InvalidInput(f"Stored {model.__name__} entry is malformed: {exc}") from exc


def stored_number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Stored value {value!r} is not numeric") from exc


def dump_list(models: List[BaseModel]) -> List[Dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in models]


async def resolve_customer(user_id: str, customer_id: str) -> Dict[str, Any]:
    customer = None
    if customer_id:
        customer = await asyncio.to_thread(
            customers_repository.fetch_customer, user_id, customer_id
        )
    if not customer:
        raise CustomerNotFound("Customer not found or not accessible by your account")
    return customer


def customer_columns(customer: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "customerId": customer["id"],
        "customerActualName": customer.get("name"),
        "currencyCode": customer.get("currency") or settings.default_currency,
    }


async def list_documents(user_id: str, kind: DocumentKind) -> List[Dict[str, Any]]:
    return await asyncio.to_thread(
        documents_repository.fetch_documents, DOCUMENT_TABLES[kind], user_id
    )


async def get_document(
    user_id: str, kind: DocumentKind, document_id: str
) -> Dict[str, Any]:
    row = await asyncio.to_thread(
        documents_repository.fetch_document, DOCUMENT_TABLES[kind], document_id, user_id
    )
    if not row:
        raise DocumentNotFound(f"{kind.value} {document_id} not found")
    return row


async def delete_document(user_id: str, kind: DocumentKind, document_id: str) -> None:
    deleted = await asyncio.to_thread(
        documents_repository.delete_document, DOCUMENT_TABLES[kind], document_id, user_id
    )
    if not deleted:
        raise DocumentNotFound(f"{kind.value} {document_id} not found")


async def _insert_with_new_number(
    user_id: str, kind: DocumentKind, record: Dict[str, Any]
) -> Dict[str, Any]:
    number = await numbering_service.allocate_document_number(user_id, kind)
    payload = {**record, NUMBER_COLUMNS[kind]: number}
    return await asyncio.to_thread(
        documents_repository.insert_document, DOCUMENT_TABLES[kind], payload
    )


async def insert_numbered(
    user_id: str, kind: DocumentKind, record: Dict[str, Any]
) -> Dict[str, Any]:
    """Allocate a number and insert; a duplicate number is re-allocated once.

    Before the retry the counter is moved past the highest number already
    stored for the tenant, so records numbered outside the counter do not
    keep colliding.

    Nothing is written unless a number was definitively allocated.
    """
    try:
        return await _insert_with_new_number(user_id, kind, record)
    except DuplicateNumber:
        logger.warning(
            "%s number already taken for user %s; allocating a new one",
            kind.value,
            user_id,
        )
    rows = await list_documents(user_id, kind)
    await numbering_service.catch_up_sequence(
        user_id, kind, [row.get(NUMBER_COLUMNS[kind]) for row in rows]
    )
    return await _insert_with_new_number(user_id, kind, record)


async def update_owned(
    user_id: str, kind: DocumentKind, document_id: str, record: Dict[str, Any]
) -> Dict[str, Any]:
    row = await asyncio.to_thread(
        documents_repository.update_document,
        DOCUMENT_TABLES[kind],
        document_id,
        user_id,
        record,
    )
    if not row:
        raise DocumentNotFound(f"{kind.value} {document_id} not found")
    return row
