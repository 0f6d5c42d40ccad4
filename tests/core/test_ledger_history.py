"""Tests for build_history — pure projection of ledger entries, no IO."""

from datetime import datetime, timezone

from merch_store.core.domain_types import PeerTransfer, Purchase
from merch_store.core.ledger_history import build_history, counterpart_ids

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _peer(id_, sender, recipient, amount):
    return PeerTransfer(
        id=id_, sender_id=sender, recipient_id=recipient, amount=amount, created_at=NOW,
    )


def _purchase(id_, user, item, price):
    return Purchase(id=id_, user_id=user, item_name=item, price=price, created_at=NOW)


def test_splits_received_and_sent():
    entries = [_peer(1, 2, 1, 50), _peer(2, 1, 3, 30)]
    history = build_history(1, entries, {2: "bob", 3: "carol"})
    assert [(r.from_user, r.amount) for r in history.received] == [("bob", 50)]
    assert [(s.to_user, s.amount) for s in history.sent] == [("carol", 30)]
    assert history.partial is False


def test_purchases_never_appear_in_history():
    entries = [_purchase(1, 1, "pen", 10), _peer(2, 1, 2, 100)]
    history = build_history(1, entries, {2: "bob"})
    assert history.received == []
    assert len(history.sent) == 1


def test_unresolvable_counterpart_skipped_and_flagged():
    entries = [_peer(1, 99, 1, 5), _peer(2, 2, 1, 7)]
    history = build_history(1, entries, {2: "bob"})
    assert [(r.from_user, r.amount) for r in history.received] == [("bob", 7)]
    assert history.partial is True


def test_keeps_retrieval_order():
    entries = [_peer(5, 1, 2, 3), _peer(1, 1, 3, 4), _peer(3, 1, 2, 5)]
    history = build_history(1, entries, {2: "bob", 3: "carol"})
    assert [s.amount for s in history.sent] == [3, 4, 5]


def test_entries_of_other_users_ignored():
    history = build_history(1, [_peer(1, 2, 3, 10)], {2: "bob", 3: "carol"})
    assert history.received == [] and history.sent == []


def test_counterpart_ids_collects_both_directions_only_for_peers():
    entries = [_peer(1, 2, 1, 5), _peer(2, 1, 3, 5), _purchase(3, 1, "cup", 20)]
    assert counterpart_ids(1, entries) == {2, 3}
