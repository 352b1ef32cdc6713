#!/usr/bin/env python3
"""
WO-07 Paint Cart Tests

Tests:
1. Staging snapshots the canvas color once
2. Recolor keeps the first snapshot
3. Erase / clear return colors to restore
4. Token accounting (one per staged cell)
5. Checkout success updates the canvas snapshot
6. Checkout failure empties the cart and returns every snapshot
"""

import pytest

from paintpack.cart import PaintCart
from paintpack.op.color import Color
from paintpack.op.errors import IndexOutOfRange, InvalidColor
from paintpack.runner import Payload

RED = Color(0xFF0000)
BLUE = Color(0x0000FF)


def test_stage_snapshots():
    print("Testing stage snapshots...")

    cart = PaintCart(canvas={5: 0x123456})
    assert cart.stage(5, RED) is True
    assert cart.stage(6, "#0000ff") is True
    assert cart.stage(5, RED) is False, "Same color is a no-op"
    assert cart.stage(5, BLUE) is True

    assert len(cart) == 2 and cart.get(5) == BLUE
    assert cart.restore_map() == {5: Color(0x123456), 6: Color(0)}

    with pytest.raises(IndexOutOfRange):
        cart.stage(4096, RED)
    with pytest.raises(InvalidColor):
        cart.stage(0, "nope")

    print("  ✓ First snapshot kept")


def test_erase_and_clear():
    print("Testing erase + clear...")

    cart = PaintCart(canvas={1: 7})
    cart.stage_many([(1, RED), (2, RED), (3, BLUE)])

    assert cart.erase(1) == Color(7)
    assert cart.erase(1) is None, "Already erased"
    assert 1 not in cart

    restore = cart.clear()
    assert restore == {2: Color(0), 3: Color(0)}
    assert len(cart) == 0 and cart.restore_map() == {}

    print("  ✓ Restore colors returned")


def test_tokens():
    print("Testing token accounting...")

    cart = PaintCart()
    cart.stage_many((i, RED) for i in range(10))
    assert cart.tokens_needed() == 10
    assert cart.tokens_to_buy(4) == 6
    assert cart.tokens_to_buy(50) == 0

    updates = cart.updates()
    assert len(updates) == 10 and updates.get(3) == RED

    print("  ✓ One token per cell")


def test_checkout_success():
    print("Testing checkout success...")

    cart = PaintCart(canvas={0: BLUE})
    cart.stage_many([(0, RED), (1, RED), (64, RED), (65, RED), (200, BLUE)])

    sent = []
    ok, rc, restore = cart.checkout(lambda p: sent.append(p.entry) or "tx")
    assert ok and rc.committed == 2 and restore == {}
    assert sent == ["setPixelAreasCompact", "setPixelColorsRLEPalette"]
    assert len(cart) == 0

    # canvas snapshot now holds the painted colors
    cart.stage(0, BLUE)
    assert cart.erase(0) == RED

    print("  ✓ Cart emptied, canvas updated")


def test_checkout_failure():
    print("Testing checkout failure...")

    cart = PaintCart(canvas={0: BLUE})
    cart.stage_many([(0, RED), (1, RED), (300, BLUE)])

    def reject_rle(p: Payload):
        if p.entry == "setPixelColorsRLEPalette":
            raise RuntimeError("execution reverted")
        return "tx"

    ok, rc, restore = cart.checkout(reject_rle)
    assert not ok
    assert rc.committed == 1 and rc.failed_at == 1, "Rectangle payload already applied"
    assert restore == {0: BLUE, 1: Color(0), 300: Color(0)}
    assert len(cart) == 0

    print("  ✓ Snapshots returned, no rollback assumed")


def run_tests():
    print("\n" + "="*60)
    print("WO-07 Paint Cart Tests")
    print("="*60 + "\n")

    test_stage_snapshots()
    test_erase_and_clear()
    test_tokens()
    test_checkout_success()
    test_checkout_failure()

    print("\n" + "="*60)
    print("✓ All WO-07 tests passed")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_tests()
