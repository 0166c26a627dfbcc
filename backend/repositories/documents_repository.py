from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

from constants import UNIQUE_VIOLATION_CODE
from errors import DuplicateNumber
from supabase_client import get_supabase


def _raise_for_unique_violation(exc: APIError) -> None:
    if exc.code == UNIQUE_VIOLATION_CODE:
        raise DuplicateNumber(exc.message or "Duplicate document number") from exc


def fetch_documents(table: str, user_id: str) -> List[Dict[str, Any]]:
    response = (
        get_supabase()
        .table(table)
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


def fetch_document(
    table: str, document_id: str, user_id: str
) -> Optional[Dict[str, Any]]:
    response = (
        get_supabase()
        .table(table)
        .select("*")
        .eq("id", document_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    items = response.data or []
    return items[0] if items else None


def insert_document(table: str, record: Dict[str, Any]) -> Dict[str, Any]:
    try:
        response = get_supabase().table(table).insert(record).execute()
    except APIError as exc:
        _raise_for_unique_violation(exc)
        raise
    if not response.data:
        raise RuntimeError(f"Failed to store {table} record")
    return response.data[0]


def update_document(
    table: str, document_id: str, user_id: str, record: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    try:
        response = (
            get_supabase()
            .table(table)
            .update(record)
            .eq("id", document_id)
            .eq("user_id", user_id)
            .execute()
        )
    except APIError as exc:
        _raise_for_unique_violation(exc)
        raise
    items = response.data or []
    return items[0] if items else None


def delete_document(table: str, document_id: str, user_id: str) -> bool:
    response = (
        get_supabase()
        .table(table)
        .delete()
        .eq("id", document_id)
        .eq("user_id", user_id)
        .execute()
    )
    return bool(response.data)
