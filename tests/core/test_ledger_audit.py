"""Tests for find_inventory_discrepancies — inventory vs purchase ledger."""

from datetime import datetime, timezone

from merch_store.core.domain_types import Purchase
from merch_store.core.ledger_audit import count_purchases, find_inventory_discrepancies

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _buy(id_, item):
    return Purchase(id=id_, user_id=1, item_name=item, price=10, created_at=NOW)


def test_consistent_inventory_has_no_discrepancies():
    purchases = [_buy(1, "pen"), _buy(2, "pen"), _buy(3, "cup")]
    assert find_inventory_discrepancies(purchases, {"pen": 2, "cup": 1}) == {}


def test_reports_missing_and_extra_items():
    purchases = [_buy(1, "pen")]
    result = find_inventory_discrepancies(purchases, {"pen": 2, "book": 1})
    assert result == {"pen": (1, 2), "book": (0, 1)}


def test_empty_inputs():
    assert find_inventory_discrepancies([], {}) == {}
    assert count_purchases([]) == {}
