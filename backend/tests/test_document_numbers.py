from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import InMemorySequenceStore
from constants import DocumentKind
from errors import InvalidInput, SequenceUnavailable
from services.document_numbers import (
    DocumentNumberAllocator,
    format_document_number,
    highest_number,
    prefix_for,
)


@pytest.fixture
def allocator():
    return DocumentNumberAllocator(InMemorySequenceStore())


@pytest.mark.parametrize(
    "prefix, number, expected",
    [
        ("INV-", 7, "INV-007"),
        ("INV-", 1500, "INV-1500"),
        ("OF-", 1, "OF-001"),
        ("PO-", 999, "PO-999"),
    ],
)
def test_format_pads_to_three_digits_without_truncating(prefix, number, expected):
    assert format_document_number(prefix, number) == expected


def test_format_honours_custom_width():
    assert format_document_number("Q", 42, min_digits=5) == "Q00042"


def test_first_use_starts_at_one(allocator):
    assert allocator.next_number("tenant-a", "INV-") == 1
    assert allocator.next_number("tenant-a", "INV-") == 2


def test_counters_are_scoped_by_tenant(allocator):
    allocator.next_number("tenant-a", "INV-")
    allocator.next_number("tenant-a", "INV-")

    assert allocator.next_number("tenant-b", "INV-") == 1
    assert allocator.next_number("tenant-a", "INV-") == 3


def test_counters_are_scoped_by_prefix(allocator):
    allocator.next_number("tenant-a", "INV-")

    assert allocator.next_number("tenant-a", "PO-") == 1
    assert allocator.next_number("tenant-a", "INV-") == 2


def test_concurrent_allocations_are_distinct_and_contiguous(allocator):
    for _ in range(5):
        allocator.next_number("tenant-a", "OF-")

    calls = 200
    with ThreadPoolExecutor(max_workers=16) as pool:
        numbers = list(
            pool.map(lambda _: allocator.next_number("tenant-a", "OF-"), range(calls))
        )

    assert len(set(numbers)) == calls
    assert sorted(numbers) == list(range(6, 6 + calls))


def test_allocation_only_uses_the_atomic_increment():
    class RecordingStore(InMemorySequenceStore):
        def __init__(self):
            super().__init__()
            self.peeks = 0

        def peek(self, tenant_id, prefix):
            self.peeks += 1
            return super().peek(tenant_id, prefix)

    store = RecordingStore()
    DocumentNumberAllocator(store).next_number("tenant-a", "INV-")

    assert store.increments == 1
    assert store.peeks == 0


def test_peek_does_not_consume(allocator):
    allocator.next_number("tenant-a", "INV-")

    assert allocator.peek_number("tenant-a", "INV-") == 2
    assert allocator.peek_number("tenant-a", "INV-") == 2
    assert allocator.next_number("tenant-a", "INV-") == 2


def test_store_failure_surfaces_as_sequence_unavailable():
    store = InMemorySequenceStore()
    store.offline = True

    with pytest.raises(SequenceUnavailable):
        DocumentNumberAllocator(store).next_number("tenant-a", "INV-")


@pytest.mark.parametrize("bad_value", [0, -1, None, "abc", True])
def test_invalid_store_values_are_rejected(bad_value):
    class BrokenStore:
        def increment(self, tenant_id, prefix):
            return bad_value

        def peek(self, tenant_id, prefix):
            return bad_value

    with pytest.raises(SequenceUnavailable):
        DocumentNumberAllocator(BrokenStore()).next_number("tenant-a", "INV-")


@pytest.mark.parametrize("tenant_id, prefix", [("", "INV-"), ("tenant-a", "")])
def test_missing_key_parts_are_invalid_input(allocator, tenant_id, prefix):
    with pytest.raises(InvalidInput):
        allocator.next_number(tenant_id, prefix)


def test_prefix_comes_from_branding_settings():
    assert prefix_for({"invoicePrefix": "ACME-"}, DocumentKind.INVOICE) == ("ACME-", False)


@pytest.mark.parametrize(
    "settings_row",
    [None, {}, {"invoicePrefix": None}, {"invoicePrefix": "  "}],
)
def test_missing_prefix_falls_back_to_default(settings_row):
    assert prefix_for(settings_row, DocumentKind.INVOICE) == ("INV-", True)


def test_each_kind_has_its_own_default():
    assert prefix_for(None, DocumentKind.ORDER_FORM)[0] == "OF-"
    assert prefix_for(None, DocumentKind.PURCHASE_ORDER)[0] == "PO-"


def test_advance_moves_the_counter_forward_only(allocator):
    allocator.advance_to("tenant-a", "OF-", 7)
    assert allocator.next_number("tenant-a", "OF-") == 8

    allocator.advance_to("tenant-a", "OF-", 3)
    assert allocator.next_number("tenant-a", "OF-") == 9


def test_advance_to_zero_does_not_touch_the_store():
    class RefusingStore(InMemorySequenceStore):
        def advance(self, tenant_id, prefix, floor):
            raise AssertionError("advance should not be called")

    DocumentNumberAllocator(RefusingStore()).advance_to("tenant-a", "OF-", 0)


def test_highest_number_reads_only_matching_numeric_suffixes():
    numbers = ["OF-001", "OF-012", "OF-DRAFT", "INV-900", None, "OF-", "OF-1²", "OF-007"]

    assert highest_number(numbers, "OF-") == 12
    assert highest_number(numbers, "PO-") == 0
