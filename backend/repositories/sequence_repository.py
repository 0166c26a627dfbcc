from typing import Any, Dict

import httpx
from postgrest.exceptions import APIError

from constants import ADVANCE_SEQUENCE_RPC, NEXT_SEQUENCE_RPC, PEEK_SEQUENCE_RPC
from errors import SequenceUnavailable
from supabase_client import get_supabase


class SupabaseSequenceStore:
    """Counters kept in the ``document_sequences`` table.

    Every operation is a single Postgres function call; the increment is one
    ``INSERT ... ON CONFLICT DO UPDATE ... RETURNING`` statement, so the
    database serialises concurrent callers on the counter row.
    """

    def _call(self, function: str, params: Dict[str, Any]) -> int:
        try:
            response = get_supabase().rpc(function, params).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise SequenceUnavailable(
                f"{function} failed for prefix {params['p_prefix']!r}: {exc}"
            ) from exc
        if response.data is None:
            raise SequenceUnavailable(f"{function} returned no value")
        return response.data

    def increment(self, tenant_id: str, prefix: str) -> int:
        return self._call(NEXT_SEQUENCE_RPC, {"p_user_id": tenant_id, "p_prefix": prefix})

    def peek(self, tenant_id: str, prefix: str) -> int:
        return self._call(PEEK_SEQUENCE_RPC, {"p_user_id": tenant_id, "p_prefix": prefix})

    def advance(self, tenant_id: str, prefix: str, floor: int) -> int:
        return self._call(
            ADVANCE_SEQUENCE_RPC,
            {"p_user_id": tenant_id, "p_prefix": prefix, "p_floor": floor},
        )
