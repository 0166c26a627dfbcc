import asyncio
import logging
from typing import Any, Iterable

from config import settings
from constants import DocumentKind
from errors import SequenceUnavailable
from repositories import branding_repository
from repositories.sequence_repository import SupabaseSequenceStore
from schemas import NextNumberResponse
from services.document_numbers import (
    DocumentNumberAllocator,
    format_document_number,
    highest_number,
    prefix_for,
)

logger = logging.getLogger("billing-backend")

allocator = DocumentNumberAllocator(SupabaseSequenceStore())


async def resolve_prefix(user_id: str, kind: DocumentKind) -> str:
    branding = await asyncio.to_thread(
        branding_repository.fetch_branding_settings, user_id
    )
    prefix, used_default = prefix_for(branding, kind)
    if used_default:
        logger.warning(
            "No %s prefix configured for user %s; using default %r",
            kind.value,
            user_id,
            prefix,
        )
    return prefix


async def allocate_document_number(user_id: str, kind: DocumentKind) -> str:
    prefix = await resolve_prefix(user_id, kind)
    try:
        number = await asyncio.wait_for(
            asyncio.to_thread(allocator.next_number, user_id, prefix),
            timeout=settings.sequence_timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        logger.warning(
            "Timed out allocating %s number for user %s prefix %r; outcome unknown",
            kind.value,
            user_id,
            prefix,
        )
        raise SequenceUnavailable(
            f"Timed out allocating a {kind.value} number",
            outcome_unknown=True,
        ) from exc
    except SequenceUnavailable:
        logger.exception(
            "Sequence allocation failed for user %s prefix %r", user_id, prefix
        )
        raise
    document_number = format_document_number(
        prefix, number, settings.document_number_min_digits
    )
    logger.info("Allocated %s number %s for user %s", kind.value, document_number, user_id)
    return document_number


async def preview_document_number(
    user_id: str, kind: DocumentKind
) -> NextNumberResponse:
    prefix = await resolve_prefix(user_id, kind)
    number = await asyncio.to_thread(allocator.peek_number, user_id, prefix)
    return NextNumberResponse(
        prefix=prefix,
        next_number=number,
        document_number=format_document_number(
            prefix, number, settings.document_number_min_digits
        ),
    )


async def catch_up_sequence(
    user_id: str, kind: DocumentKind, existing_numbers: Iterable[Any]
) -> None:
    """Move the counter past numbers already stored under the current prefix.

    Covers records numbered before the counter existed.
    """
    prefix = await resolve_prefix(user_id, kind)
    floor = highest_number(existing_numbers, prefix)
    if not floor:
        return
    try:
        await asyncio.to_thread(allocator.advance_to, user_id, prefix, floor)
    except SequenceUnavailable:
        logger.exception(
            "Sequence catch-up failed for user %s prefix %r", user_id, prefix
        )
        raise
    logger.warning(
        "Advanced %s sequence for user %s prefix %r to %d", kind.value, user_id, prefix, floor
    )
