from typing import Any, Dict, Optional

from constants import BRANDING_SETTINGS_TABLE
from supabase_client import get_supabase


def fetch_branding_settings(user_id: str) -> Optional[Dict[str, Any]]:
    response = (
        get_supabase()
        .table(BRANDING_SETTINGS_TABLE)
        .select("*")
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    items = response.data or []
    return items[0] if items else None
