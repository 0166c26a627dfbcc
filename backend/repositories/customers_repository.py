from typing import Any, Dict, Optional

from constants import CUSTOMER_TABLE
from supabase_client import get_supabase


def fetch_customer(user_id: str, customer_id: str) -> Optional[Dict[str, Any]]:
    response = (
        get_supabase()
        .table(CUSTOMER_TABLE)
        .select("id, name, currency")
        .eq("id", customer_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    items = response.data or []
    return items[0] if items else None
