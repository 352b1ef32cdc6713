#!/usr/bin/env python3
"""
WO-02 Rectangle Extraction Tests

Tests:
1. Solid 2x2 block -> one rectangle, empty residual
2. Isolated pixel never becomes a rectangle
3. Horizontal / vertical strips (1xN, Nx1) are rectangles
4. Height growth stops at the first incomplete row
5. Claimed cells are not reused; residual partitions the input
6. Area-descending order, stable on discovery
7. Non-64 grid widths (no wrap across rows)
8. Membership helpers
"""

from paintpack.op.color import Color
from paintpack.op.grid import GridSpec, PixelUpdateSet
from paintpack.op.rectangles import (
    Rectangle,
    find_rectangles,
    is_index_in_rectangles,
    rectangle_cells,
)

RED = Color(0xFF0000)
GREEN = Color(0x00FF00)
BLUE = Color(0x0000FF)


def _set(pairs, grid=None):
    return PixelUpdateSet.from_pairs(pairs, grid or GridSpec())


def test_solid_block():
    print("Testing solid 2x2 block...")

    ps = _set([(0, RED), (1, RED), (64, RED), (65, RED)])
    rects, residual = find_rectangles(ps)

    assert rects == [Rectangle(0, 0, 2, 2, RED)], f"Got {rects}"
    assert len(residual) == 0, f"Residual should be empty, got {residual}"

    print("  ✓ 2x2 block found")


def test_isolated_pixel():
    print("Testing isolated pixel...")

    ps = _set([(100, RED), (300, GREEN)])
    rects, residual = find_rectangles(ps)

    assert rects == []
    assert residual.indices() == {100, 300}
    assert residual.get(300) == GREEN

    print("  ✓ Single cells stay in residual")


def test_strips():
    print("Testing strips...")

    # 1x3 horizontal at row 2
    ps = _set([(128, BLUE), (129, BLUE), (130, BLUE)])
    rects, residual = find_rectangles(ps)
    assert rects == [Rectangle(0, 2, 3, 1, BLUE)]
    assert len(residual) == 0

    # 3x1 vertical at column 5
    ps = _set([(5, BLUE), (69, BLUE), (133, BLUE)])
    rects, residual = find_rectangles(ps)
    assert rects == [Rectangle(5, 0, 1, 3, BLUE)]
    assert len(residual) == 0

    print("  ✓ Strips are rectangles")


def test_height_stops_on_partial_row():
    print("Testing height stop on partial row...")

    # Row 0: x=0..2 red; row 1: x=0..1 red (x=2 missing)
    ps = _set([(0, RED), (1, RED), (2, RED), (64, RED), (65, RED)])
    rects, residual = find_rectangles(ps)

    # Greedy: width 3 first, row 1 incomplete -> 3x1; then (0,1) grows 2x1
    assert rects == [Rectangle(0, 0, 3, 1, RED), Rectangle(0, 1, 2, 1, RED)], f"Got {rects}"
    assert len(residual) == 0

    # Color mismatch in next row also stops growth
    ps = _set([(0, RED), (1, RED), (64, RED), (65, GREEN)])
    rects, residual = find_rectangles(ps)
    assert rects == [Rectangle(0, 0, 2, 1, RED)], f"Got {rects}"
    assert residual.indices() == {64, 65}

    print("  ✓ Height growth requires a full row")


def test_partition_and_claims():
    print("Testing claimed cells and partition...")

    # L-shape of red + scattered cells of other colors
    pairs = [(0, RED), (1, RED), (2, RED), (64, RED), (128, RED), (192, RED),
             (70, GREEN), (71, BLUE), (200, GREEN), (201, GREEN)]
    ps = _set(pairs)
    rects, residual = find_rectangles(ps)

    covered = []
    for r in rects:
        cells = list(rectangle_cells(r, ps.grid))
        assert all(ps.get(i) == r.color for i in cells), f"{r} covers wrong color"
        assert r.area > 1
        covered.extend(cells)

    assert len(covered) == len(set(covered)), "A cell was claimed twice"
    assert set(covered).isdisjoint(residual.indices())
    assert set(covered) | residual.indices() == ps.indices()

    print("  ✓ Rectangles + residual partition the input")


def test_area_order_stable():
    print("Testing area ordering...")

    # Discovery order: A (2x1 at row 0), B (2x1 at row 2), C (3x2 at row 4)
    pairs = [(0, RED), (1, RED),
             (128, GREEN), (129, GREEN),
             (256, BLUE), (257, BLUE), (258, BLUE), (320, BLUE), (321, BLUE), (322, BLUE)]
    rects, _ = find_rectangles(_set(pairs))

    assert [r.area for r in rects] == [6, 2, 2]
    assert rects[1].color == RED and rects[2].color == GREEN, "Equal areas keep discovery order"

    print("  ✓ Area-descending, stable")


def test_other_grid_width():
    print("Testing 5-wide grid...")

    g = GridSpec(5, 4)
    # indices 3,4 (row 0, x=3..4) and 5,6 (row 1, x=0..1) are consecutive
    # but must not merge across the row boundary
    ps = PixelUpdateSet.from_pairs([(3, RED), (4, RED), (5, RED), (6, RED), (8, RED), (9, RED)], g)
    rects, residual = find_rectangles(ps)

    assert Rectangle(3, 0, 2, 2, RED) in rects, f"Got {rects}"
    assert Rectangle(0, 1, 2, 1, RED) in rects, f"Got {rects}"
    assert len(residual) == 0

    print("  ✓ Width threaded through geometry")


def test_membership():
    print("Testing membership helpers...")

    g = GridSpec()
    r = Rectangle(2, 3, 2, 2, RED)
    assert list(rectangle_cells(r, g)) == [194, 195, 258, 259]
    assert is_index_in_rectangles(195, [r], g)
    assert not is_index_in_rectangles(196, [r], g)
    assert not is_index_in_rectangles(0, [], g)

    print("  ✓ Membership helpers work")


def test_empty_and_determinism():
    print("Testing empty input + determinism...")

    rects, residual = find_rectangles(_set([]))
    assert rects == [] and len(residual) == 0

    pairs = [(i, Color((i * 37) % 3)) for i in range(0, 4096, 3)]
    a = find_rectangles(_set(pairs))
    b = find_rectangles(_set(list(reversed(pairs))))
    assert a[0] == b[0], "Result must not depend on insertion order"
    assert a[1] == b[1]

    print("  ✓ Empty + deterministic")


def run_tests():
    print("\n" + "="*60)
    print("WO-02 Rectangle Extraction Tests")
    print("="*60 + "\n")

    test_solid_block()
    test_isolated_pixel()
    test_strips()
    test_height_stops_on_partial_row()
    test_partition_and_claims()
    test_area_order_stable()
    test_other_grid_width()
    test_membership()
    test_empty_and_determinism()

    print("\n" + "="*60)
    print("✓ All WO-02 tests passed")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_tests()
