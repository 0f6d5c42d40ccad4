"""Ledger History — pure projection of ledger entries into one user's coin history.

Invariants:
    - Only PeerTransfer entries appear in history; Purchases are spending, not transfers
    - Entries keep the order they were given in (retrieval order, not sorted)
    - An entry whose counterpart has no username is skipped, and the result is flagged partial
    - Never raises on unresolvable counterparts

Design Decisions:
    - Usernames passed in as a dict: the shell batches the lookup, this stays IO-free
    - Skip-and-flag over fail-whole-query: history stays available when a
      counterpart row is missing
"""

from collections.abc import Iterable, Mapping

from merch_store.core.domain_types import (
    CoinHistory, LedgerEntry, PeerTransfer, ReceivedCoins, SentCoins, UserId,
)


def counterpart_ids(user_id: UserId, entries: Iterable[LedgerEntry]) -> set[UserId]:
    """Ids of every user on the other side of this user's peer transfers."""
    ids: set[UserId] = set()
    for entry in entries:
        if not isinstance(entry, PeerTransfer):
            continue
        if entry.recipient_id == user_id:
            ids.add(entry.sender_id)
        if entry.sender_id == user_id:
            ids.add(entry.recipient_id)
    return ids


def build_history(
    user_id: UserId,
    entries: Iterable[LedgerEntry],
    usernames: Mapping[int, str],
) -> CoinHistory:
    """Split peer transfers into received/sent lists with counterpart usernames."""
    history = CoinHistory()
    for entry in entries:
        if not isinstance(entry, PeerTransfer):
            continue
        if entry.recipient_id == user_id:
            name = usernames.get(entry.sender_id)
            if name is None:
                history.partial = True
            else:
                history.received.append(ReceivedCoins(from_user=name, amount=entry.amount))
        if entry.sender_id == user_id:
            name = usernames.get(entry.recipient_id)
            if name is None:
                history.partial = True
            else:
                history.sent.append(SentCoins(to_user=name, amount=entry.amount))
    return history
