"""Per-tenant document numbering.

The allocator is stateless. Every ``next_number`` call is a single atomic
fetch-and-increment in the backing store; there is no read-then-write
path here, so concurrent creates for one tenant cannot be handed the same
number. Failed or abandoned creates leave gaps, which are acceptable.
"""

from typing import Any, Iterable, Mapping, Optional, Protocol, Tuple

from constants import DEFAULT_PREFIXES, PREFIX_SETTINGS_COLUMNS, DocumentKind
from errors import InvalidInput, SequenceUnavailable

MIN_NUMBER_DIGITS = 3


class SequenceStore(Protocol):
    def increment(self, tenant_id: str, prefix: str) -> int:
        """Atomically advance the (tenant, prefix) counter and return it.

        A counter that does not exist yet is created at 1.
        """

    def peek(self, tenant_id: str, prefix: str) -> int:
        """Return the value the next ``increment`` would issue, without issuing it."""

    def advance(self, tenant_id: str, prefix: str, floor: int) -> int:
        """Raise the counter to at least ``floor``; never lowers it."""


def _checked_value(value: Any) -> int:
    if isinstance(value, bool):
        raise SequenceUnavailable(f"Sequence store returned a non-integer value: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise SequenceUnavailable(
            f"Sequence store returned a non-integer value: {value!r}"
        ) from exc
    if number < 1:
        raise SequenceUnavailable(f"Sequence store returned {number}")
    return number


def _require_key(tenant_id: str, prefix: str) -> None:
    if not tenant_id:
        raise InvalidInput("A tenant id is required to allocate a document number")
    if not prefix:
        raise InvalidInput("A prefix is required to allocate a document number")


class DocumentNumberAllocator:
    def __init__(self, store: SequenceStore) -> None:
        self._store = store

    def next_number(self, tenant_id: str, prefix: str) -> int:
        _require_key(tenant_id, prefix)
        return _checked_value(self._store.increment(tenant_id, prefix))

    def peek_number(self, tenant_id: str, prefix: str) -> int:
        _require_key(tenant_id, prefix)
        return _checked_value(self._store.peek(tenant_id, prefix))

    def advance_to(self, tenant_id: str, prefix: str, floor: int) -> None:
        """Make sure the next number issued is above ``floor``."""
        _require_key(tenant_id, prefix)
        if floor < 1:
            return
        _checked_value(self._store.advance(tenant_id, prefix, floor))


def format_document_number(
    prefix: str, number: int, min_digits: int = MIN_NUMBER_DIGITS
) -> str:
    """``("INV-", 7)`` -> ``"INV-007"``; padding never truncates longer numbers."""
    return f"{prefix}{str(number).zfill(min_digits)}"


def prefix_for(
    branding_settings: Optional[Mapping[str, Any]], kind: DocumentKind
) -> Tuple[str, bool]:
    """Return ``(prefix, used_default)`` for a document kind."""
    configured = (branding_settings or {}).get(PREFIX_SETTINGS_COLUMNS[kind])
    if isinstance(configured, str) and configured.strip():
        return configured.strip(), False
    return DEFAULT_PREFIXES[kind], True


def highest_number(document_numbers: Iterable[Any], prefix: str) -> int:
    """Largest numeric suffix among numbers issued under ``prefix``, or 0."""
    highest = 0
    for value in document_numbers:
        if not isinstance(value, str) or not value.startswith(prefix):
            continue
        suffix = value[len(prefix):]
        if suffix.isascii() and suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest
