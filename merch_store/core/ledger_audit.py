"""Ledger Audit — checks that inventory agrees with the purchase ledger.

Invariants:
    - For every (user, item), inventory quantity == number of Purchase entries
    - Pure: inputs are already-loaded entries and quantities, no IO
"""

from collections import Counter
from collections.abc import Iterable, Mapping

from merch_store.core.domain_types import Purchase


def count_purchases(purchases: Iterable[Purchase]) -> Counter[str]:
    return Counter(p.item_name for p in purchases)


def find_inventory_discrepancies(
    purchases: Iterable[Purchase], inventory: Mapping[str, int],
) -> dict[str, tuple[int, int]]:
    """Return {item_name: (purchased, owned)} for every item where the two disagree."""
    purchased = count_purchases(purchases)
    return {
        item: (purchased.get(item, 0), inventory.get(item, 0))
        for item in set(purchased) | set(inventory)
        if purchased.get(item, 0) != inventory.get(item, 0)
    }
