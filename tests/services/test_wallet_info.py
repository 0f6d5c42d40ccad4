"""Wallet info aggregate — the buy-then-send scenario end to end through the engine."""

import pytest

from merch_store.core.errors import UserNotFoundError
from merch_store.services.wallet_info import get_wallet_info


async def test_buy_pen_then_send_scenario(transfer_engine, make_user, read):
    x = await make_user("x", 1000)
    y = await make_user("y", 250)

    await transfer_engine.purchase(x, "pen")
    info = await read(lambda db: get_wallet_info(db, x))
    assert info.coins == 990
    assert info.inventory == {"pen": 1}

    await transfer_engine.send(x, "y", 100)

    x_info = await read(lambda db: get_wallet_info(db, x))
    y_info = await read(lambda db: get_wallet_info(db, y))
    assert x_info.coins == 890
    assert y_info.coins == 350
    assert [(s.to_user, s.amount) for s in x_info.coin_history.sent] == [("y", 100)]
    assert x_info.coin_history.received == []
    assert [(r.from_user, r.amount) for r in y_info.coin_history.received] == [("x", 100)]


async def test_unknown_user_raises(read):
    with pytest.raises(UserNotFoundError):
        await read(lambda db: get_wallet_info(db, 31337))
